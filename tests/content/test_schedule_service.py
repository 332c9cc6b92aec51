from __future__ import annotations

from dataclasses import replace

import pytest

from vine_portal.core.enums import DataSource, EventType
from vine_portal.core.exceptions import BackendError, NotFoundError, ValidationError
from vine_portal.schedules.model import ScheduleEvent
from vine_portal.schedules.service import ScheduleService
from vine_portal.schedules.static_data import STATIC_EVENTS


class InMemoryEvents:
    def __init__(self, events=(), fail=False):
        self.rows = {e.id: e for e in events}
        self.fail = fail
        self.writes = 0

    def list_active(self):
        if self.fail:
            raise BackendError("Failed to list schedule events", db_code="08006")
        return sorted((e for e in self.rows.values() if e.is_active), key=ScheduleEvent.sort_key)

    def get_by_id(self, event_id):
        return self.rows.get(event_id)

    def create(self, values):
        self.writes += 1
        event = ScheduleEvent(id=f"e{len(self.rows) + 1}", **values)
        self.rows[event.id] = event
        return event

    def update(self, event_id, values):
        self.writes += 1
        self.rows[event_id] = replace(self.rows[event_id], **values)
        return self.rows[event_id]

    def delete(self, event_id):
        return self.rows.pop(event_id, None) is not None


WEEKLY = {
    "title_pt": "Culto",
    "title_en": "Service",
    "event_type": "weekly_recurring",
    "icon_name": "church",
    "day_of_week": 0,
    "time": "10:00",
}


def test_static_schedule_when_empty_or_failing():
    for repo in (InMemoryEvents(), InMemoryEvents(fail=True)):
        events, source = ScheduleService(repo).list_active()
        assert source == DataSource.STATIC
        assert [e.id for e in events] == [e.id for e in sorted(STATIC_EVENTS, key=ScheduleEvent.sort_key)]


def test_database_events_sorted_by_type_day_and_order():
    repo = InMemoryEvents()
    svc = ScheduleService(repo)
    special = svc.create({"title_pt": "Retiro", "title_en": "Retreat", "event_type": "special", "icon_name": "tent"})
    wed = svc.create({**WEEKLY, "day_of_week": 3, "display_order": 2})
    sun = svc.create(WEEKLY)

    events, source = svc.list_active()

    assert source == DataSource.DATABASE
    assert [e.id for e in events] == [special.id, sun.id, wed.id]


@pytest.mark.parametrize(
    "missing, code",
    [("day_of_week", "MISSING_DAY_OF_WEEK"), ("time", "MISSING_TIME")],
)
def test_weekly_event_needs_day_and_time(missing, code):
    repo = InMemoryEvents()
    with pytest.raises(ValidationError) as exc:
        ScheduleService(repo).create({k: v for k, v in WEEKLY.items() if k != missing})
    assert exc.value.code == code
    assert repo.writes == 0


def test_invalid_event_type_and_day():
    svc = ScheduleService(InMemoryEvents())
    with pytest.raises(ValidationError) as exc:
        svc.create({**WEEKLY, "event_type": "monthly"})
    assert exc.value.code == "INVALID_EVENT_TYPE"
    with pytest.raises(ValidationError) as exc:
        svc.create({**WEEKLY, "day_of_week": 7})
    assert exc.value.code == "INVALID_DAY_OF_WEEK"


def test_update_rechecks_weekly_rules_against_stored_event():
    repo = InMemoryEvents()
    svc = ScheduleService(repo)
    special = svc.create({"title_pt": "Retiro", "title_en": "Retreat", "event_type": "special", "icon_name": "tent"})

    with pytest.raises(ValidationError) as exc:
        svc.update(special.id, {"event_type": "weekly_recurring", "day_of_week": 5})
    assert exc.value.code == "MISSING_TIME"

    updated = svc.update(special.id, {"event_type": "weekly_recurring", "day_of_week": 5, "time": "19:30"})
    assert updated.event_type == EventType.WEEKLY_RECURRING
    assert updated.time == "19:30"


def test_missing_event_is_not_found():
    svc = ScheduleService(InMemoryEvents())
    with pytest.raises(NotFoundError):
        svc.update("nope", {"time": "10:00"})
    with pytest.raises(NotFoundError):
        svc.delete("nope")
