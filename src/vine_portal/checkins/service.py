from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import date, datetime
from typing import Any, Callable, List, Mapping, Optional, Sequence

from ..auth.model import AuthUser
from ..auth.service import resolve_display_name
from ..children.repository import ChildRepository, VisitorChildRepository
from ..common.datetime_utils import now_utc
from ..common.validators import is_blank, validate_optional_date
from ..core.enums import CheckInStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..profiles.repository import ProfileRepository
from .model import CheckIn, CheckInView
from .repository import CheckInRepository

log = logging.getLogger(__name__)


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class CheckInService:
    """Kids check-in desk: check a child in, check them out, list the day."""

    def __init__(
        self,
        check_ins: CheckInRepository,
        children: ChildRepository,
        visitor_children: VisitorChildRepository,
        profiles: ProfileRepository,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._check_ins = check_ins
        self._children = children
        self._visitor_children = visitor_children
        self._profiles = profiles
        self._clock = clock

    def _staff_name(self, user: AuthUser) -> str:
        profile = self._profiles.get_by_user_id(user.user_id)
        return resolve_display_name(user, profile.name if profile else None)

    def check_in(self, user: AuthUser, payload: Mapping[str, Any]) -> CheckIn:
        member_child_id = _optional_text(payload.get("member_child_id"))
        visitor_child_id = _optional_text(payload.get("visitor_child_id"))
        if bool(member_child_id) == bool(visitor_child_id):
            raise ValidationError(
                "Exactly one of member_child_id or visitor_child_id must be provided",
                code="INVALID_CHILD_REFERENCE",
                details={"fields": ["member_child_id", "visitor_child_id"]},
            )

        if member_child_id and self._children.get_by_id(member_child_id) is None:
            raise NotFoundError("Child not found", code="CHILD_NOT_FOUND")
        if visitor_child_id and self._visitor_children.get_by_id(visitor_child_id) is None:
            raise NotFoundError("Visitor child not found", code="VISITOR_CHILD_NOT_FOUND")

        now = self._clock()
        service_date = validate_optional_date(payload.get("service_date"), "service_date") or now.date()
        record = self._check_ins.create(
            {
                "member_child_id": member_child_id,
                "visitor_child_id": visitor_child_id,
                "service_date": service_date,
                "service_time": _optional_text(payload.get("service_time")),
                "checked_in_by": user.user_id,
                "checked_in_by_name": self._staff_name(user),
                "checked_in_at": now,
                "checkin_notes": _optional_text(payload.get("checkin_notes")),
                "status": CheckInStatus.CHECKED_IN,
            }
        )
        log.info(
            "child checked in id=%s child_type=%s by=%s",
            record.id,
            record.child_type.value,
            record.checked_in_by_name,
        )
        return record

    def check_out(self, user: AuthUser, payload: Mapping[str, Any]) -> CheckIn:
        check_in_id = payload.get("id")
        if is_blank(check_in_id):
            raise ValidationError("id is required", code="MISSING_ID", details={"missing_fields": ["id"]})
        check_in_id = str(check_in_id).strip()

        current = self._check_ins.get_by_id(check_in_id)
        if current is None:
            raise NotFoundError("Check-in not found", code="CHECK_IN_NOT_FOUND")
        if current.status != CheckInStatus.CHECKED_IN:
            raise ConflictError("Child is already checked out", code="ALREADY_CHECKED_OUT")

        record = self._check_ins.mark_checked_out(
            check_in_id,
            checked_out_by=user.user_id,
            checked_out_by_name=self._staff_name(user),
            checked_out_at=self._clock(),
            checkout_notes=_optional_text(payload.get("checkout_notes")),
        )
        if record is None:
            # another desk checked the child out between the read and the write
            raise ConflictError("Child is already checked out", code="ALREADY_CHECKED_OUT")
        log.info("child checked out id=%s by=%s", record.id, record.checked_out_by_name)
        return record

    def list_views(
        self,
        *,
        status: Optional[str] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        service_date: Optional[str] = None,
    ) -> Sequence[CheckInView]:
        parsed_status = None
        if not is_blank(status):
            try:
                parsed_status = CheckInStatus(status)
            except ValueError:
                raise ValidationError(
                    "status must be checked_in or checked_out",
                    code="INVALID_STATUS",
                    details={"field": "status"},
                ) from None
        start = validate_optional_date(from_date, "from_date")
        end = validate_optional_date(to_date, "to_date")
        if start and end and start > end:
            raise ValidationError("from_date must not be after to_date", code="INVALID_DATE_RANGE")
        return self._check_ins.list_views(
            status=parsed_status,
            from_date=start,
            to_date=end,
            service_date=validate_optional_date(service_date, "service_date"),
        )

    @staticmethod
    def daily_summary(views: Sequence[CheckInView]) -> List[dict]:
        """Per service day counts for the history tab, newest day first."""

        days: "OrderedDict[date, dict]" = OrderedDict()
        for v in sorted(views, key=lambda v: v.check_in.service_date, reverse=True):
            day = days.setdefault(
                v.check_in.service_date,
                {"date": v.check_in.service_date.isoformat(), "total": 0, "checked_out": 0},
            )
            day["total"] += 1
            if v.check_in.status == CheckInStatus.CHECKED_OUT:
                day["checked_out"] += 1
        return list(days.values())
