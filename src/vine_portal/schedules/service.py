from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Tuple

from ..common.validators import is_blank, parse_bool, require_fields, require_non_empty, validate_optional_date
from ..core.enums import DataSource, EventType
from ..core.exceptions import BackendError, NotFoundError, ValidationError
from .model import ScheduleEvent
from .repository import ScheduleEventRepository
from .static_data import sorted_static_events

log = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title_pt", "title_en", "event_type", "icon_name")
_OPTIONAL_TEXT = ("description_pt", "description_en", "frequency_pt", "frequency_en")


def _parse_day_of_week(value: Any):
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError("day_of_week must be 0-6", code="INVALID_DAY_OF_WEEK", details={"field": "day_of_week"})
    try:
        day = int(value)
    except (TypeError, ValueError):
        raise ValidationError("day_of_week must be 0-6", code="INVALID_DAY_OF_WEEK", details={"field": "day_of_week"}) from None
    if not 0 <= day <= 6:
        raise ValidationError("day_of_week must be 0-6", code="INVALID_DAY_OF_WEEK", details={"field": "day_of_week"})
    return day


class ScheduleService:
    def __init__(self, events: ScheduleEventRepository):
        self._events = events

    def list_active(self) -> Tuple[List[ScheduleEvent], DataSource]:
        try:
            events = list(self._events.list_active())
        except BackendError as e:
            log.warning("schedule from database unavailable, serving static list: %s", e.message)
            events = []
        if events:
            return events, DataSource.DATABASE
        return sorted_static_events(), DataSource.STATIC

    def get(self, event_id: str) -> ScheduleEvent:
        event = self._events.get_by_id(event_id)
        if event is None:
            raise NotFoundError("Schedule event not found", code="NOT_FOUND")
        return event

    def create(self, payload: Mapping[str, Any]) -> ScheduleEvent:
        require_fields(payload, REQUIRED_FIELDS)
        values = self._clean(payload)
        values.setdefault("display_order", 0)
        values.setdefault("is_active", True)
        self._check_weekly(values)
        event = self._events.create(values)
        log.info("schedule event created id=%s type=%s", event.id, event.event_type.value)
        return event

    def update(self, event_id: str, payload: Mapping[str, Any]) -> ScheduleEvent:
        current = self.get(event_id)
        values = self._clean({k: v for k, v in payload.items() if k != "id"})
        merged = {**current.to_dict(), **values}
        merged["event_type"] = EventType(merged["event_type"])
        self._check_weekly(merged)
        event = self._events.update(event_id, values)
        if event is None:
            raise NotFoundError("Schedule event not found", code="NOT_FOUND")
        log.info("schedule event updated id=%s", event_id)
        return event

    def delete(self, event_id: str) -> None:
        if not self._events.delete(event_id):
            raise NotFoundError("Schedule event not found", code="NOT_FOUND")
        log.info("schedule event deleted id=%s", event_id)

    @staticmethod
    def _check_weekly(values: Mapping[str, Any]) -> None:
        if values.get("event_type") != EventType.WEEKLY_RECURRING:
            return
        if values.get("day_of_week") is None:
            raise ValidationError("day_of_week is required for weekly recurring events", code="MISSING_DAY_OF_WEEK")
        if is_blank(values.get("time")):
            raise ValidationError("time is required for weekly recurring events", code="MISSING_TIME")

    @staticmethod
    def _clean(payload: Mapping[str, Any]) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for key in ("title_pt", "title_en", "icon_name"):
            if key in payload:
                values[key] = require_non_empty(payload[key], key)
        if "event_type" in payload:
            try:
                values["event_type"] = EventType(payload["event_type"])
            except ValueError:
                raise ValidationError(
                    'Invalid event_type. Must be "weekly_recurring" or "special"',
                    code="INVALID_EVENT_TYPE",
                    details={"received_type": payload["event_type"]},
                ) from None
        if "day_of_week" in payload:
            values["day_of_week"] = _parse_day_of_week(payload["day_of_week"])
        if "time" in payload:
            values["time"] = None if is_blank(payload["time"]) else str(payload["time"]).strip()
        for key in _OPTIONAL_TEXT:
            if key in payload:
                values[key] = None if is_blank(payload[key]) else str(payload[key]).strip()
        if "display_order" in payload:
            try:
                values["display_order"] = int(payload["display_order"] or 0)
            except (TypeError, ValueError):
                raise ValidationError("display_order must be an integer", details={"field": "display_order"}) from None
        if "special_date" in payload:
            values["special_date"] = validate_optional_date(payload["special_date"], "special_date")
        if "is_active" in payload:
            values["is_active"] = bool(parse_bool(payload["is_active"], "is_active"))
        return values
