from __future__ import annotations

from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Portal roles stored in the ``users.role`` column."""

    MEMBER = "member"
    TEACHER = "teacher"
    LEADER = "leader"
    ADMIN = "admin"
    TRAINEE = "trainee"

    @classmethod
    def parse(cls, value: object) -> Optional["Role"]:
        if isinstance(value, Role):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


STAFF_ROLES = frozenset({Role.TEACHER, Role.LEADER, Role.ADMIN})
REPORT_ROLES = frozenset({Role.LEADER, Role.ADMIN})
SCHEDULE_EDITOR_ROLES = frozenset({Role.ADMIN, Role.TRAINEE})
ADMIN_ROLES = frozenset({Role.ADMIN})


class CheckInStatus(str, Enum):
    """Lifecycle of a kids check-in row. Only moves forward."""

    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"


class ChildType(str, Enum):
    MEMBER = "member"
    VISITOR = "visitor"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class ProfileSection(str, Enum):
    """Field groups of the member profile, each saved on its own."""

    PERSONAL = "personal"
    SPIRITUAL = "spiritual"
    VOLUNTEER = "volunteer"
    FAMILY = "family"


class EventType(str, Enum):
    WEEKLY_RECURRING = "weekly_recurring"
    SPECIAL = "special"


class Orientation(str, Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class HowFound(str, Enum):
    FRIEND = "friend"
    GOOGLE = "google"
    SOCIAL = "social"
    PASSING = "passing"
    OTHER = "other"


class DataSource(str, Enum):
    """Where listed content came from."""

    DATABASE = "database"
    STATIC = "static"
