from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.constants import TABLE_VOLUNTEERS
from ..database.supabase_base import SupabaseRepository, parse_timestamp, run, to_row
from .model import Volunteer
from .repository import VolunteerRepository


def _to_volunteer(r: Dict[str, Any]) -> Volunteer:
    return Volunteer(
        id=str(r["id"]),
        name=r["name"],
        phone=r["phone"],
        description=r.get("description") or "",
        areas=tuple(r.get("areas") or ()),
        email=r.get("email"),
        created_at=parse_timestamp(r.get("created_at")),
    )


class SupabaseVolunteerRepository(SupabaseRepository, VolunteerRepository):
    table_name = TABLE_VOLUNTEERS

    def create(self, values: Dict[str, Any]) -> Volunteer:
        return _to_volunteer(run(self._table().insert(to_row(values)), action="register volunteer")[0])

    def list(self, *, area: Optional[str] = None) -> Sequence[Volunteer]:
        query = self._table().select("*")
        if area:
            query = query.contains("areas", [area])
        rows = run(query.order("created_at", desc=True), action="list volunteers")
        return [_to_volunteer(r) for r in rows]
