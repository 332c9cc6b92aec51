from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import isoformat_or_none
from ..core.enums import CheckInStatus, ChildType


@dataclass(frozen=True)
class CheckIn:
    """One child's attendance at one service.

    Exactly one of ``member_child_id`` / ``visitor_child_id`` is set. Status
    only moves from checked_in to checked_out.
    """

    id: str
    member_child_id: Optional[str]
    visitor_child_id: Optional[str]
    service_date: date
    service_time: Optional[str]
    checked_in_by: str
    checked_in_by_name: str
    checked_in_at: datetime
    status: CheckInStatus
    checkin_notes: Optional[str] = None
    checked_out_by: Optional[str] = None
    checked_out_by_name: Optional[str] = None
    checked_out_at: Optional[datetime] = None
    checkout_notes: Optional[str] = None

    @property
    def child_type(self) -> ChildType:
        return ChildType.MEMBER if self.member_child_id else ChildType.VISITOR

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "member_child_id": self.member_child_id,
            "visitor_child_id": self.visitor_child_id,
            "service_date": self.service_date.isoformat(),
            "service_time": self.service_time,
            "checked_in_by": self.checked_in_by,
            "checked_in_by_name": self.checked_in_by_name,
            "checked_in_at": self.checked_in_at.isoformat(),
            "checkin_notes": self.checkin_notes,
            "status": self.status.value,
            "checked_out_by": self.checked_out_by,
            "checked_out_by_name": self.checked_out_by_name,
            "checked_out_at": isoformat_or_none(self.checked_out_at),
            "checkout_notes": self.checkout_notes,
        }


@dataclass(frozen=True)
class CheckInView:
    """Read-model for the check-in desk: the row joined with its child and guardian."""

    check_in: CheckIn
    child_name: Optional[str]
    parent_name: Optional[str]
    parent_phone: Optional[str]
    child_date_of_birth: Optional[date] = None
    allergies: Optional[str] = None
    special_needs: Optional[str] = None
    photo_permission: Optional[bool] = None

    @property
    def child_type(self) -> ChildType:
        return self.check_in.child_type

    def to_dict(self) -> dict:
        data = self.check_in.to_dict()
        data.update(
            {
                "child_type": self.child_type.value,
                "child_name": self.child_name,
                "parent_name": self.parent_name,
                "parent_phone": self.parent_phone,
                "child_date_of_birth": isoformat_or_none(self.child_date_of_birth),
                "allergies": self.allergies,
                "special_needs": self.special_needs,
                "photo_permission": self.photo_permission,
            }
        )
        return data
