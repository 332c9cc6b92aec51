"""Default weekly schedule, shown when the database has no active events."""

from __future__ import annotations

from ..core.enums import EventType
from .model import ScheduleEvent

STATIC_EVENTS = (
    ScheduleEvent(
        id="static-sunday-service",
        title_pt="Culto de Celebração",
        title_en="Celebration Service",
        description_pt="Louvor, Palavra e Vine Kids para as crianças.",
        description_en="Worship, the Word and Vine Kids for the children.",
        event_type=EventType.WEEKLY_RECURRING,
        day_of_week=0,
        time="10:00",
        icon_name="church",
        display_order=1,
        frequency_pt="Todo domingo",
        frequency_en="Every Sunday",
    ),
    ScheduleEvent(
        id="static-wednesday-prayer",
        title_pt="Noite de Oração",
        title_en="Prayer Night",
        event_type=EventType.WEEKLY_RECURRING,
        day_of_week=3,
        time="19:30",
        icon_name="pray",
        display_order=1,
        frequency_pt="Toda quarta-feira",
        frequency_en="Every Wednesday",
    ),
    ScheduleEvent(
        id="static-friday-cells",
        title_pt="Células nas Casas",
        title_en="Home Cell Groups",
        event_type=EventType.WEEKLY_RECURRING,
        day_of_week=5,
        time="19:30",
        icon_name="users",
        display_order=1,
        frequency_pt="Toda sexta-feira",
        frequency_en="Every Friday",
    ),
)


def sorted_static_events() -> list[ScheduleEvent]:
    return sorted(STATIC_EVENTS, key=ScheduleEvent.sort_key)
