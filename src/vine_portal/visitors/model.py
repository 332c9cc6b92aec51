from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.enums import HowFound

CSV_HEADER = ("visit_date", "name", "phone", "how_found", "how_found_details", "created_at")


@dataclass(frozen=True)
class Visitor:
    """First-time guest registration."""

    id: str
    visit_date: date
    name: str
    phone: str
    how_found: HowFound
    how_found_details: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "visit_date": self.visit_date.isoformat(),
            "name": self.name,
            "phone": self.phone,
            "how_found": self.how_found.value,
            "how_found_details": self.how_found_details,
            "created_at": isoformat_or_none(self.created_at),
        }

    def to_csv_row(self) -> tuple:
        return (
            self.visit_date.isoformat(),
            self.name,
            self.phone,
            self.how_found.value,
            self.how_found_details,
            isoformat_or_none(self.created_at),
        )
