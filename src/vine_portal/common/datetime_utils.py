from __future__ import annotations

from datetime import date, datetime, timezone


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_utc() -> datetime:
    """Current UTC time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def today_local() -> date:
    return datetime.now().date()


def age_on(dob: date, today: date) -> int:
    """Whole years between ``dob`` and ``today``."""
    years = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        years -= 1
    return years


def isoformat_or_none(value) -> str | None:
    return value.isoformat() if value is not None else None
