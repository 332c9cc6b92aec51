from __future__ import annotations

import re
import uuid
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.constants import TABLE_CHILDREN, TABLE_VISITOR_CHILDREN
from ..database.supabase_base import SupabaseRepository, first, parse_date, parse_timestamp, run, to_row
from .model import MemberChild, VisitorChild
from .repository import ChildRepository, VisitorChildRepository


def _to_member_child(r: Dict[str, Any]) -> MemberChild:
    return MemberChild(
        id=str(r["id"]),
        name=r.get("name"),
        date_of_birth=parse_date(r["date_of_birth"]),
        parent1_id=str(r["parent1_id"]),
        parent2_id=str(r["parent2_id"]) if r.get("parent2_id") else None,
        allergies=r.get("allergies"),
        medical_notes=r.get("medical_notes"),
        special_needs=r.get("special_needs"),
        photo_permission=bool(r.get("photo_permission", True)),
        created_at=parse_timestamp(r.get("created_at")),
    )


def to_visitor_child(r: Dict[str, Any]) -> VisitorChild:
    return VisitorChild(
        id=str(r["id"]),
        name=r["name"],
        date_of_birth=parse_date(r["date_of_birth"]),
        parent_name=r["parent_name"],
        parent_phone=r["parent_phone"],
        parent_email=r.get("parent_email"),
        allergies=r.get("allergies"),
        special_needs=r.get("special_needs"),
        emergency_contact_name=r.get("emergency_contact_name"),
        emergency_contact_phone=r.get("emergency_contact_phone"),
        photo_permission=bool(r.get("photo_permission", False)),
        created_at=parse_timestamp(r.get("created_at")),
    )


class SupabaseChildRepository(SupabaseRepository, ChildRepository):
    table_name = TABLE_CHILDREN

    def list_for_parent(self, parent_id: str) -> Sequence[MemberChild]:
        try:
            parent = str(uuid.UUID(str(parent_id)))
        except ValueError:
            # profile ids are uuids; anything else matches no child
            return []
        query = (
            self._table()
            .select("*")
            .or_(f"parent1_id.eq.{parent},parent2_id.eq.{parent}")
            .order("date_of_birth")
        )
        return [_to_member_child(r) for r in run(query, action="list children")]

    def get_by_id(self, child_id: str) -> Optional[MemberChild]:
        r = first(run(self._table().select("*").eq("id", child_id).limit(1), action="load child"))
        return _to_member_child(r) if r else None

    def create(self, values: Dict[str, Any]) -> MemberChild:
        return _to_member_child(run(self._table().insert(to_row(values)), action="create child")[0])

    def update(self, child_id: str, values: Dict[str, Any]) -> Optional[MemberChild]:
        payload = to_row({**values, "updated_at": now_utc()})
        r = first(run(self._table().update(payload).eq("id", child_id), action="update child"))
        return _to_member_child(r) if r else None

    def delete(self, child_id: str) -> bool:
        return bool(run(self._table().delete().eq("id", child_id), action="delete child"))


class SupabaseVisitorChildRepository(SupabaseRepository, VisitorChildRepository):
    table_name = TABLE_VISITOR_CHILDREN

    def search(self, term: Optional[str] = None) -> Sequence[VisitorChild]:
        query = self._table().select("*")
        if term:
            # commas and parentheses would break the or() filter grammar
            safe = re.sub(r"[,()*]", " ", term).strip()
            if safe:
                pattern = f"*{safe}*"
                query = query.or_(
                    f"name.ilike.{pattern},parent_name.ilike.{pattern},parent_phone.ilike.{pattern}"
                )
        rows = run(query.order("created_at", desc=True), action="list visitor children")
        return [to_visitor_child(r) for r in rows]

    def get_by_id(self, child_id: str) -> Optional[VisitorChild]:
        r = first(run(self._table().select("*").eq("id", child_id).limit(1), action="load visitor child"))
        return to_visitor_child(r) if r else None

    def create(self, values: Dict[str, Any]) -> VisitorChild:
        return to_visitor_child(run(self._table().insert(to_row(values)), action="create visitor child")[0])

    def update(self, child_id: str, values: Dict[str, Any]) -> Optional[VisitorChild]:
        payload = to_row({**values, "updated_at": now_utc()})
        r = first(run(self._table().update(payload).eq("id", child_id), action="update visitor child"))
        return to_visitor_child(r) if r else None
