from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.constants import TABLE_SCHEDULE_EVENTS
from ..core.enums import EventType
from ..database.supabase_base import SupabaseRepository, first, parse_date, run, to_row
from .model import ScheduleEvent
from .repository import ScheduleEventRepository


def _to_event(r: Dict[str, Any]) -> ScheduleEvent:
    return ScheduleEvent(
        id=str(r["id"]),
        title_pt=r["title_pt"],
        title_en=r["title_en"],
        event_type=EventType(r["event_type"]),
        icon_name=r["icon_name"],
        description_pt=r.get("description_pt"),
        description_en=r.get("description_en"),
        day_of_week=r.get("day_of_week"),
        time=r.get("time"),
        display_order=int(r.get("display_order") or 0),
        special_date=parse_date(r.get("special_date")),
        frequency_pt=r.get("frequency_pt"),
        frequency_en=r.get("frequency_en"),
        is_active=bool(r.get("is_active", True)),
    )


class SupabaseScheduleEventRepository(SupabaseRepository, ScheduleEventRepository):
    table_name = TABLE_SCHEDULE_EVENTS

    def list_active(self) -> Sequence[ScheduleEvent]:
        query = (
            self._table()
            .select("*")
            .eq("is_active", True)
            .order("event_type")
            .order("day_of_week", nullsfirst=False)
            .order("display_order")
        )
        return [_to_event(r) for r in run(query, action="list schedule events")]

    def get_by_id(self, event_id: str) -> Optional[ScheduleEvent]:
        r = first(run(self._table().select("*").eq("id", event_id).limit(1), action="load schedule event"))
        return _to_event(r) if r else None

    def create(self, values: Dict[str, Any]) -> ScheduleEvent:
        return _to_event(run(self._table().insert(to_row(values)), action="create schedule event")[0])

    def update(self, event_id: str, values: Dict[str, Any]) -> Optional[ScheduleEvent]:
        payload = to_row({**values, "updated_at": now_utc()})
        r = first(run(self._table().update(payload).eq("id", event_id), action="update schedule event"))
        return _to_event(r) if r else None

    def delete(self, event_id: str) -> bool:
        return bool(run(self._table().delete().eq("id", event_id), action="delete schedule event"))
