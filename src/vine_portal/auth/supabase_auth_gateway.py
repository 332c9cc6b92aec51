from __future__ import annotations

import logging
from typing import Any, Optional

from supabase import AuthError

from ..core.exceptions import BackendError
from ..database.connection import BackendConnection
from .model import AuthSession, AuthUser
from .repository import AuthGateway

log = logging.getLogger(__name__)


def _to_auth_user(user: Any) -> AuthUser:
    metadata = getattr(user, "user_metadata", None) or {}
    name = metadata.get("name") or metadata.get("full_name")
    return AuthUser(user_id=str(user.id), email=getattr(user, "email", None), metadata_name=name or None)


class SupabaseAuthGateway(AuthGateway):
    def __init__(self, conn: BackendConnection):
        self._conn = conn

    def get_user(self, token: str) -> Optional[AuthUser]:
        try:
            res = self._conn.public().auth.get_user(token)
        except AuthError as e:
            log.info("token rejected: %s", e.message)
            return None
        if res is None or not res.user:
            return None
        return _to_auth_user(res.user)

    def sign_in(self, email: str, password: str) -> Optional[AuthSession]:
        try:
            res = self._conn.sign_in_client().auth.sign_in_with_password({"email": email, "password": password})
        except AuthError as e:
            log.info("sign in rejected email=%s: %s", email, e.message)
            return None
        if not res.session or not res.user:
            return None
        return AuthSession(
            access_token=res.session.access_token,
            refresh_token=res.session.refresh_token,
            expires_at=res.session.expires_at,
            user=_to_auth_user(res.user),
        )

    def sign_out(self, token: str) -> None:
        try:
            self._conn.admin().auth.admin.sign_out(token)
        except AuthError as e:
            raise BackendError("Failed to sign out", db_code=getattr(e, "code", None), db_message=e.message) from e
