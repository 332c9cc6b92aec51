from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Tuple

from ..common.datetime_utils import isoformat_or_none
from ..core.enums import Gender, ProfileSection

SECTION_FIELDS = {
    ProfileSection.PERSONAL: ("name", "gender", "date_of_birth", "phone", "email"),
    ProfileSection.SPIRITUAL: ("is_baptized", "pays_tithe", "life_group"),
    ProfileSection.VOLUNTEER: ("volunteer_areas", "volunteer_outros_details"),
    ProfileSection.FAMILY: ("is_married", "spouse_id", "spouse_name"),
}

PROFILE_REQUIRED_FIELDS = ("name", "phone", "email", "gender")


@dataclass(frozen=True)
class MemberProfile:
    """A church member's self-maintained record, owned by one auth user."""

    id: str
    user_id: str
    name: str
    gender: Optional[Gender] = None
    date_of_birth: Optional[date] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    is_baptized: Optional[bool] = None
    pays_tithe: Optional[bool] = None
    life_group: Optional[str] = None
    volunteer_areas: Tuple[str, ...] = field(default_factory=tuple)
    volunteer_outros_details: Optional[str] = None
    is_married: bool = False
    spouse_id: Optional[str] = None
    spouse_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "gender": self.gender.value if self.gender else None,
            "date_of_birth": isoformat_or_none(self.date_of_birth),
            "phone": self.phone,
            "email": self.email,
            "is_baptized": self.is_baptized,
            "pays_tithe": self.pays_tithe,
            "life_group": self.life_group,
            "volunteer_areas": list(self.volunteer_areas),
            "volunteer_outros_details": self.volunteer_outros_details,
            "is_married": self.is_married,
            "spouse_id": self.spouse_id,
            "spouse_name": self.spouse_name,
            "created_at": isoformat_or_none(self.created_at),
            "updated_at": isoformat_or_none(self.updated_at),
        }


@dataclass(frozen=True)
class SpouseRepair:
    """One fix applied by the spouse link repair job."""

    profile_id: str
    spouse_id: Optional[str]
    action: str

    def to_dict(self) -> dict:
        return {"profile_id": self.profile_id, "spouse_id": self.spouse_id, "action": self.action}
