from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.constants import TABLE_CHECK_INS
from ..core.enums import CheckInStatus
from ..database.supabase_base import SupabaseRepository, first, parse_date, parse_timestamp, run, to_row
from .model import CheckIn, CheckInView
from .repository import CheckInRepository

_VIEW_SELECT = """
*,
member_child:children(
    id, name, date_of_birth, allergies, special_needs, photo_permission,
    parent1:member_profiles!children_parent1_id_fkey(id, name, phone),
    parent2:member_profiles!children_parent2_id_fkey(id, name, phone)
),
visitor_child:visitor_children(
    id, name, date_of_birth, parent_name, parent_phone, allergies, special_needs, photo_permission
)
"""


def _to_check_in(r: Dict[str, Any]) -> CheckIn:
    return CheckIn(
        id=str(r["id"]),
        member_child_id=str(r["member_child_id"]) if r.get("member_child_id") else None,
        visitor_child_id=str(r["visitor_child_id"]) if r.get("visitor_child_id") else None,
        service_date=parse_date(r["service_date"]),
        service_time=r.get("service_time"),
        checked_in_by=str(r["checked_in_by"]),
        checked_in_by_name=r["checked_in_by_name"],
        checked_in_at=parse_timestamp(r["checked_in_at"]),
        status=CheckInStatus(r["status"]),
        checkin_notes=r.get("checkin_notes"),
        checked_out_by=str(r["checked_out_by"]) if r.get("checked_out_by") else None,
        checked_out_by_name=r.get("checked_out_by_name"),
        checked_out_at=parse_timestamp(r.get("checked_out_at")),
        checkout_notes=r.get("checkout_notes"),
    )


def _to_view(r: Dict[str, Any]) -> CheckInView:
    check_in = _to_check_in(r)
    member = r.get("member_child")
    visitor = r.get("visitor_child")
    if member:
        parents = [p for p in (member.get("parent1"), member.get("parent2")) if p]
        names = [p["name"] for p in parents if p.get("name")]
        phones = [p["phone"] for p in parents if p.get("phone")]
        return CheckInView(
            check_in=check_in,
            child_name=member.get("name"),
            parent_name=" & ".join(names) or None,
            parent_phone=phones[0] if phones else None,
            child_date_of_birth=parse_date(member.get("date_of_birth")),
            allergies=member.get("allergies"),
            special_needs=member.get("special_needs"),
            photo_permission=member.get("photo_permission"),
        )
    visitor = visitor or {}
    return CheckInView(
        check_in=check_in,
        child_name=visitor.get("name"),
        parent_name=visitor.get("parent_name"),
        parent_phone=visitor.get("parent_phone"),
        child_date_of_birth=parse_date(visitor.get("date_of_birth")),
        allergies=visitor.get("allergies"),
        special_needs=visitor.get("special_needs"),
        photo_permission=visitor.get("photo_permission"),
    )


class SupabaseCheckInRepository(SupabaseRepository, CheckInRepository):
    table_name = TABLE_CHECK_INS

    def create(self, values: Dict[str, Any]) -> CheckIn:
        return _to_check_in(run(self._table().insert(to_row(values)), action="create check-in")[0])

    def get_by_id(self, check_in_id: str) -> Optional[CheckIn]:
        r = first(run(self._table().select("*").eq("id", check_in_id).limit(1), action="load check-in"))
        return _to_check_in(r) if r else None

    def mark_checked_out(
        self,
        check_in_id: str,
        *,
        checked_out_by: str,
        checked_out_by_name: str,
        checked_out_at: datetime,
        checkout_notes: Optional[str] = None,
    ) -> Optional[CheckIn]:
        payload = to_row(
            {
                "status": CheckInStatus.CHECKED_OUT,
                "checked_out_by": checked_out_by,
                "checked_out_by_name": checked_out_by_name,
                "checked_out_at": checked_out_at,
                "checkout_notes": checkout_notes,
                "updated_at": now_utc(),
            }
        )
        query = (
            self._table()
            .update(payload)
            .eq("id", check_in_id)
            .eq("status", CheckInStatus.CHECKED_IN.value)
        )
        r = first(run(query, action="check out"))
        return _to_check_in(r) if r else None

    def list_views(
        self,
        *,
        status: Optional[CheckInStatus] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        service_date: Optional[date] = None,
    ) -> Sequence[CheckInView]:
        query = self._table().select(_VIEW_SELECT)
        if status is not None:
            query = query.eq("status", status.value)
        if service_date is not None:
            query = query.eq("service_date", service_date.isoformat())
        if from_date is not None:
            query = query.gte("checked_in_at", from_date.isoformat())
        if to_date is not None:
            query = query.lt("checked_in_at", (to_date + timedelta(days=1)).isoformat())
        rows = run(query.order("checked_in_at", desc=True), action="list check-ins")
        return [_to_view(r) for r in rows]
