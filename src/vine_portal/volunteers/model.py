from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple

from ..common.datetime_utils import isoformat_or_none

CSV_HEADER = ("name", "email", "phone", "areas", "description", "created_at")


@dataclass(frozen=True)
class Volunteer:
    id: str
    name: str
    phone: str
    description: str
    areas: Tuple[str, ...] = field(default_factory=tuple)
    email: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "description": self.description,
            "areas": list(self.areas),
            "created_at": isoformat_or_none(self.created_at),
        }

    def to_csv_row(self) -> tuple:
        return (
            self.name,
            self.email,
            self.phone,
            "; ".join(self.areas),
            self.description,
            isoformat_or_none(self.created_at),
        )
