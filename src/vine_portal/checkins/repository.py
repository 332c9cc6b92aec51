from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Protocol, Sequence

from ..core.enums import CheckInStatus
from .model import CheckIn, CheckInView


class CheckInRepository(Protocol):
    def create(self, values: Dict[str, Any]) -> CheckIn:
        raise NotImplementedError

    def get_by_id(self, check_in_id: str) -> Optional[CheckIn]:
        raise NotImplementedError

    def mark_checked_out(
        self,
        check_in_id: str,
        *,
        checked_out_by: str,
        checked_out_by_name: str,
        checked_out_at: datetime,
        checkout_notes: Optional[str] = None,
    ) -> Optional[CheckIn]:
        """Conditional on the row still being checked in; None when nothing matched."""

        raise NotImplementedError

    def list_views(
        self,
        *,
        status: Optional[CheckInStatus] = None,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        service_date: Optional[date] = None,
    ) -> Sequence[CheckInView]:
        """Joined rows, newest check-in first. Date bounds are inclusive."""

        raise NotImplementedError
