from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.enums import EventType


@dataclass(frozen=True)
class ScheduleEvent:
    """A weekly recurring meeting or a one-off special event shown on the schedule page."""

    id: str
    title_pt: str
    title_en: str
    event_type: EventType
    icon_name: str
    description_pt: Optional[str] = None
    description_en: Optional[str] = None
    day_of_week: Optional[int] = None  # 0 = Sunday
    time: Optional[str] = None
    display_order: int = 0
    special_date: Optional[date] = None
    frequency_pt: Optional[str] = None
    frequency_en: Optional[str] = None
    is_active: bool = True

    def sort_key(self) -> tuple:
        return (
            self.event_type.value,
            self.day_of_week is None,
            self.day_of_week or 0,
            self.display_order,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title_pt": self.title_pt,
            "title_en": self.title_en,
            "description_pt": self.description_pt,
            "description_en": self.description_en,
            "event_type": self.event_type.value,
            "day_of_week": self.day_of_week,
            "time": self.time,
            "icon_name": self.icon_name,
            "display_order": self.display_order,
            "special_date": isoformat_or_none(self.special_date),
            "frequency_pt": self.frequency_pt,
            "frequency_en": self.frequency_en,
            "is_active": self.is_active,
        }
