from __future__ import annotations

import logging
from typing import Optional

from ..core.constants import TABLE_USERS
from ..core.enums import Role
from ..database.supabase_base import SupabaseRepository, first, run
from .repository import RoleRepository

log = logging.getLogger(__name__)


class SupabaseRoleRepository(SupabaseRepository, RoleRepository):
    table_name = TABLE_USERS

    def get_role(self, user_id: str) -> Optional[Role]:
        row = first(run(self._table().select("role").eq("id", user_id).limit(1), action="load user role"))
        if not row:
            return None
        role = Role.parse(row.get("role"))
        if role is None:
            log.warning("unknown role value user_id=%s role=%r", user_id, row.get("role"))
        return role
