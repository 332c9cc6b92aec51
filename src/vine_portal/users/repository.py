from __future__ import annotations

from typing import Optional, Protocol

from ..core.enums import Role


class RoleRepository(Protocol):
    def get_role(self, user_id: str) -> Optional[Role]:
        raise NotImplementedError
