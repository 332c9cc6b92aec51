from __future__ import annotations

from typing import Optional, Protocol

from .model import AuthSession, AuthUser


class AuthGateway(Protocol):
    def get_user(self, token: str) -> Optional[AuthUser]:
        """Return the user owning ``token`` or None when it is invalid/expired."""

        raise NotImplementedError

    def sign_in(self, email: str, password: str) -> Optional[AuthSession]:
        raise NotImplementedError

    def sign_out(self, token: str) -> None:
        raise NotImplementedError
