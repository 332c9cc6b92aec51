from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..common.validators import (
    digits_only,
    is_blank,
    parse_choice,
    require_fields,
    require_non_empty,
    validate_email,
    validate_volunteer_areas,
)
from ..core.constants import VOLUNTEER_AREA_OPTIONS
from ..core.exceptions import ValidationError
from .model import Volunteer
from .repository import VolunteerRepository

log = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "phone", "description", "areas")


class VolunteerService:
    def __init__(self, volunteers: VolunteerRepository):
        self._volunteers = volunteers

    def register(self, payload: Mapping[str, Any]) -> Volunteer:
        require_fields(payload, REQUIRED_FIELDS)
        phone = require_non_empty(payload["phone"], "phone")
        if len(digits_only(phone)) < 10:
            raise ValidationError(
                "Invalid phone number format - must have at least 10 digits",
                code="INVALID_PHONE",
                details={"field": "phone"},
            )
        email = None
        if not is_blank(payload.get("email")):
            email = validate_email(payload["email"]).lower()

        volunteer = self._volunteers.create(
            {
                "name": require_non_empty(payload["name"], "name"),
                "email": email,
                "phone": phone,
                "description": require_non_empty(payload["description"], "description"),
                "areas": validate_volunteer_areas(payload["areas"], "areas"),
            }
        )
        log.info("volunteer registered id=%s areas=%s", volunteer.id, ",".join(volunteer.areas))
        return volunteer

    def list(self, *, area: Optional[str] = None) -> Sequence[Volunteer]:
        if is_blank(area):
            return self._volunteers.list()
        return self._volunteers.list(area=parse_choice(area, VOLUNTEER_AREA_OPTIONS, "area"))
