from __future__ import annotations

import re
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..core.constants import MAX_PERSON_AGE, VOLUNTEER_AREA_OPTIONS
from ..core.exceptions import ValidationError
from .datetime_utils import age_on, parse_iso_date, today_local

_PHONE_PATTERNS = (
    re.compile(r"^\d{10}$"),
    re.compile(r"^\d{11}$"),
    re.compile(r"^\d{3}[-\s]\d{3}[-\s]\d{4}$"),
    re.compile(r"^\(\d{3}\)\s?\d{3}[-\s]?\d{4}$"),
    re.compile(r"^\+1[-\s]?\d{3}[-\s]?\d{3}[-\s]?\d{4}$"),
    re.compile(r"^\+1[-\s]?\(\d{3}\)\s?\d{3}[-\s]?\d{4}$"),
)
_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def require_non_empty(value: Any, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required", code="MISSING_FIELD", details={"missing_fields": [field_name]})
    return value.strip()


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def require_fields(payload: Mapping[str, Any], fields: Iterable[str]) -> None:
    """Raise one ValidationError listing every missing field."""

    missing = [f for f in fields if is_blank(payload.get(f))]
    if missing:
        raise ValidationError(
            f"Missing required fields: {', '.join(missing)}",
            code="MISSING_FIELDS",
            details={"missing_fields": missing},
        )


def digits_only(value: str) -> str:
    return re.sub(r"\D", "", value or "")


def is_valid_phone(value: Any) -> bool:
    """North American phone in one of the accepted layouts (10 or 11 digits)."""

    if not isinstance(value, str):
        return False
    phone = value.strip()
    if len(digits_only(phone)) not in (10, 11):
        return False
    return any(p.match(phone) for p in _PHONE_PATTERNS)


def validate_phone(value: Any, field_name: str = "phone") -> str:
    if not is_valid_phone(value):
        raise ValidationError(
            "Invalid phone number. Use a format like (519) 123-4567 or 519-123-4567",
            code="INVALID_PHONE",
            details={"field": field_name},
        )
    return value.strip()


def is_valid_email(value: Any) -> bool:
    return isinstance(value, str) and bool(_EMAIL_PATTERN.match(value.strip()))


def validate_email(value: Any, field_name: str = "email") -> str:
    if not is_valid_email(value):
        raise ValidationError("Invalid email address", code="INVALID_EMAIL", details={"field": field_name})
    return value.strip()


def validate_date_of_birth(
    value: Any,
    field_name: str = "date_of_birth",
    *,
    max_age: int = MAX_PERSON_AGE,
    today: Optional[date] = None,
) -> Optional[date]:
    """Parse and check a date of birth.

    An empty value means "not provided" and returns None. Otherwise the date
    must be YYYY-MM-DD, not in the future, and the age within [0, max_age].
    """

    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    if isinstance(value, date):
        dob = value
    else:
        try:
            dob = parse_iso_date(str(value).strip())
        except ValueError:
            raise ValidationError(
                "Invalid date. Use the format YYYY-MM-DD",
                code="INVALID_DATE",
                details={"field": field_name},
            ) from None

    today = today or today_local()
    if dob > today:
        raise ValidationError("Date of birth cannot be in the future", code="INVALID_DATE", details={"field": field_name})
    age = age_on(dob, today)
    if age < 0 or age > max_age:
        raise ValidationError(
            f"Age must be between 0 and {max_age} years",
            code="INVALID_DATE",
            details={"field": field_name},
        )
    return dob


def is_valid_date_of_birth(value: Any, *, today: Optional[date] = None) -> bool:
    try:
        validate_date_of_birth(value, today=today)
    except ValidationError:
        return False
    return True


def validate_optional_date(value: Any, field_name: str) -> Optional[date]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return parse_iso_date(str(value).strip())
    except ValueError:
        raise ValidationError(
            f"{field_name} must be a date in the format YYYY-MM-DD",
            code="INVALID_DATE",
            details={"field": field_name},
        ) from None


def validate_volunteer_areas(areas: Any, field_name: str = "volunteer_areas") -> list[str]:
    if areas is None:
        return []
    if not isinstance(areas, (list, tuple)):
        raise ValidationError(f"{field_name} must be a list", details={"field": field_name})
    invalid = [a for a in areas if a not in VOLUNTEER_AREA_OPTIONS]
    if invalid:
        raise ValidationError(
            f"Unknown volunteer areas: {', '.join(map(str, invalid))}",
            code="INVALID_VOLUNTEER_AREA",
            details={"field": field_name, "invalid": invalid, "allowed": list(VOLUNTEER_AREA_OPTIONS)},
        )
    # keep order, drop duplicates
    return list(dict.fromkeys(areas))


def parse_bool(value: Any, field_name: str) -> Optional[bool]:
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"true", "false"}:
        return value.strip().lower() == "true"
    raise ValidationError(f"{field_name} must be true or false", details={"field": field_name})


def parse_choice(value: Any, choices: Sequence[str], field_name: str) -> str:
    if value not in choices:
        raise ValidationError(
            f"{field_name} must be one of: {', '.join(choices)}",
            details={"field": field_name, "allowed": list(choices)},
        )
    return value
