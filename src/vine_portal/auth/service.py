from __future__ import annotations

import logging
from typing import Optional

from ..common.validators import require_fields
from ..core.constants import FALLBACK_STAFF_NAME
from ..core.exceptions import AuthenticationError
from ..users.permissions import role_label, role_to_permissions
from ..users.service import RoleService
from .model import AuthSession, AuthUser
from .repository import AuthGateway

log = logging.getLogger(__name__)


def resolve_display_name(user: AuthUser, profile_name: Optional[str] = None) -> str:
    """Name recorded on check-in/out rows.

    Member profile name, then the auth metadata name, then the email and
    finally a generic label.
    """

    for candidate in (profile_name, user.metadata_name, user.email):
        if candidate and candidate.strip():
            return candidate.strip()
    return FALLBACK_STAFF_NAME


class AuthService:
    """Use case: verify bearer tokens and manage sessions.

    Token verification is always delegated to the hosted auth service.
    """

    def __init__(self, gateway: AuthGateway, roles: RoleService):
        self._gateway = gateway
        self._roles = roles

    def authenticate(self, token: Optional[str]) -> AuthUser:
        if not token:
            raise AuthenticationError("Missing bearer token", code="NO_TOKEN")
        user = self._gateway.get_user(token)
        if user is None:
            raise AuthenticationError("Invalid or expired token", code="INVALID_TOKEN")
        return user

    def sign_in(self, payload: dict) -> AuthSession:
        require_fields(payload, ("email", "password"))
        email = str(payload["email"]).strip().lower()
        session = self._gateway.sign_in(email, str(payload["password"]))
        if session is None:
            raise AuthenticationError("Invalid email or password", code="INVALID_CREDENTIALS")
        log.info("signed in user_id=%s", session.user.user_id)
        return session

    def sign_out(self, token: Optional[str]) -> None:
        user = self.authenticate(token)
        self._gateway.sign_out(token)
        log.info("signed out user_id=%s", user.user_id)

    def get_session(self, token: Optional[str]) -> dict:
        user = self.authenticate(token)
        role = self._roles.get_role(user.user_id)
        return {
            "user": {"id": user.user_id, "email": user.email, "name": user.metadata_name},
            "role": role.value if role else None,
            "role_label": role_label(role),
            "permissions": role_to_permissions(role).to_dict(),
        }
