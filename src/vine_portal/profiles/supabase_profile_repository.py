from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.constants import TABLE_MEMBER_PROFILES
from ..core.enums import Gender
from ..database.supabase_base import SupabaseRepository, first, parse_date, parse_timestamp, run, to_row
from .model import MemberProfile
from .repository import ProfileRepository


def _to_profile(r: Dict[str, Any]) -> MemberProfile:
    return MemberProfile(
        id=str(r["id"]),
        user_id=str(r["user_id"]),
        name=r.get("name") or "",
        gender=Gender(r["gender"]) if r.get("gender") else None,
        date_of_birth=parse_date(r.get("date_of_birth")),
        phone=r.get("phone"),
        email=r.get("email"),
        is_baptized=r.get("is_baptized"),
        pays_tithe=r.get("pays_tithe"),
        life_group=r.get("life_group"),
        volunteer_areas=tuple(r.get("volunteer_areas") or ()),
        volunteer_outros_details=r.get("volunteer_outros_details"),
        is_married=bool(r.get("is_married")),
        spouse_id=str(r["spouse_id"]) if r.get("spouse_id") else None,
        spouse_name=r.get("spouse_name"),
        created_at=parse_timestamp(r.get("created_at")),
        updated_at=parse_timestamp(r.get("updated_at")),
    )


class SupabaseProfileRepository(SupabaseRepository, ProfileRepository):
    table_name = TABLE_MEMBER_PROFILES

    def get_by_user_id(self, user_id: str) -> Optional[MemberProfile]:
        r = first(run(self._table().select("*").eq("user_id", user_id).limit(1), action="load member profile"))
        return _to_profile(r) if r else None

    def get_by_id(self, profile_id: str) -> Optional[MemberProfile]:
        r = first(run(self._table().select("*").eq("id", profile_id).limit(1), action="load member profile"))
        return _to_profile(r) if r else None

    def list_all(self) -> Sequence[MemberProfile]:
        rows = run(self._table().select("*").order("created_at", desc=True), action="list member profiles")
        return [_to_profile(r) for r in rows]

    def list_available_spouses(self, *, exclude_id: str, gender: Gender) -> Sequence[MemberProfile]:
        query = (
            self._table()
            .select("*")
            .is_("spouse_id", "null")
            .neq("id", exclude_id)
            .eq("gender", gender.value)
            .order("name")
        )
        return [_to_profile(r) for r in run(query, action="list available spouses")]

    def create(self, values: Dict[str, Any]) -> MemberProfile:
        rows = run(self._table().insert(to_row(values)), action="create member profile")
        return _to_profile(rows[0])

    def update(
        self,
        profile_id: str,
        values: Dict[str, Any],
        *,
        expected_updated_at: Optional[datetime] = None,
    ) -> Optional[MemberProfile]:
        payload = to_row({**values, "updated_at": now_utc()})
        query = self._table().update(payload).eq("id", profile_id)
        if expected_updated_at is not None:
            query = query.eq("updated_at", expected_updated_at.isoformat())
        r = first(run(query, action="update member profile"))
        return _to_profile(r) if r else None

    def link_spouses(self, profile_a: str, profile_b: str) -> None:
        run(
            self._conn.admin().rpc("link_spouses", {"profile_a": profile_a, "profile_b": profile_b}),
            action="link spouses",
        )

    def unlink_spouses(self, profile_id: str) -> None:
        run(self._conn.admin().rpc("unlink_spouses", {"profile": profile_id}), action="unlink spouses")
