from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .repository import RoleRepository

log = logging.getLogger(__name__)


class RoleService:
    """Reads the caller's role on every call; nothing is cached."""

    def __init__(self, roles: RoleRepository):
        self._roles = roles

    def get_role(self, user_id: str) -> Optional[Role]:
        return self._roles.get_role(user_id)

    def require_role(self, user_id: str, allowed: Iterable[Role]) -> Role:
        allowed = frozenset(allowed)
        role = self.get_role(user_id)
        if role is None or role not in allowed:
            log.info("forbidden user_id=%s role=%s allowed=%s", user_id, role, sorted(r.value for r in allowed))
            raise AuthorizationError(
                "You do not have permission to perform this action",
                details={"required_roles": sorted(r.value for r in allowed)},
            )
        return role
