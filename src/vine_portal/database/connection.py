from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from ..core.exceptions import BackendNotConfiguredError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackendConfig:
    url: str
    anon_key: str
    service_role_key: str

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.anon_key and self.service_role_key)


class BackendConnection:
    """Singleton-like holder of the hosted backend clients.

    ``admin()`` uses the service-role key (bypasses row level security) and
    is only handed to repositories. ``public()`` uses the anon key and is only
    used to verify user tokens. Both are built on first use and reused for
    the life of the process. ``sign_in_client()`` builds a new anon client on
    every call; password sign-in runs on it.
    """

    _instance: Optional["BackendConnection"] = None

    def __init__(self, config: BackendConfig):
        self._config = config
        self._admin: Optional[Client] = None
        self._public: Optional[Client] = None

    @classmethod
    def get_instance(cls, config: BackendConfig) -> "BackendConnection":
        if cls._instance is None or cls._instance._config != config:
            cls._instance = BackendConnection(config)
        return cls._instance

    @property
    def is_configured(self) -> bool:
        return self._config.is_configured

    @property
    def url(self) -> str:
        return self._config.url

    def _build(self, key: str) -> Client:
        if not self.is_configured:
            raise BackendNotConfiguredError("Backend is not configured")
        return create_client(
            self._config.url,
            key,
            options=ClientOptions(auto_refresh_token=False, persist_session=False),
        )

    def admin(self) -> Client:
        if self._admin is None:
            log.info("building service-role backend client url=%s", self._config.url)
            self._admin = self._build(self._config.service_role_key)
        return self._admin

    def public(self) -> Client:
        if self._public is None:
            log.info("building anon backend client url=%s", self._config.url)
            self._public = self._build(self._config.anon_key)
        return self._public

    def sign_in_client(self) -> Client:
        return self._build(self._config.anon_key)
