from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none


@dataclass(frozen=True)
class MemberChild:
    """Child of one or two church members."""

    id: str
    name: Optional[str]
    date_of_birth: date
    parent1_id: str
    parent2_id: Optional[str] = None
    allergies: Optional[str] = None
    medical_notes: Optional[str] = None
    special_needs: Optional[str] = None
    photo_permission: bool = True
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "date_of_birth": self.date_of_birth.isoformat(),
            "parent1_id": self.parent1_id,
            "parent2_id": self.parent2_id,
            "allergies": self.allergies,
            "medical_notes": self.medical_notes,
            "special_needs": self.special_needs,
            "photo_permission": self.photo_permission,
            "created_at": isoformat_or_none(self.created_at),
        }


@dataclass(frozen=True)
class VisitorChild:
    """Child brought by a non-member, with the guardian's contact inline."""

    id: str
    name: str
    date_of_birth: date
    parent_name: str
    parent_phone: str
    parent_email: Optional[str] = None
    allergies: Optional[str] = None
    special_needs: Optional[str] = None
    emergency_contact_name: Optional[str] = None
    emergency_contact_phone: Optional[str] = None
    photo_permission: bool = False
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "date_of_birth": self.date_of_birth.isoformat(),
            "parent_name": self.parent_name,
            "parent_phone": self.parent_phone,
            "parent_email": self.parent_email,
            "allergies": self.allergies,
            "special_needs": self.special_needs,
            "emergency_contact_name": self.emergency_contact_name,
            "emergency_contact_phone": self.emergency_contact_phone,
            "photo_permission": self.photo_permission,
            "created_at": isoformat_or_none(self.created_at),
        }
