from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from ..auth.model import AuthUser
from ..common.validators import (
    is_blank,
    parse_bool,
    require_fields,
    require_non_empty,
    validate_date_of_birth,
    validate_email,
    validate_phone,
    validate_volunteer_areas,
)
from ..core.enums import Gender, ProfileSection
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import PROFILE_REQUIRED_FIELDS, SECTION_FIELDS, MemberProfile, SpouseRepair
from .repository import ProfileRepository

log = logging.getLogger(__name__)

_UNCHANGED = object()
_OPPOSITE = {Gender.MALE: Gender.FEMALE, Gender.FEMALE: Gender.MALE}


def _parse_gender(value: Any) -> Gender:
    try:
        return Gender(str(value).strip().lower())
    except ValueError:
        raise ValidationError(
            "gender must be male or female",
            code="INVALID_GENDER",
            details={"field": "gender", "allowed": [g.value for g in Gender]},
        ) from None


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_precondition(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        raise ValidationError("updated_at must be an ISO timestamp", details={"field": "updated_at"}) from None


class ProfileService:
    """Use cases for a member maintaining their own profile."""

    def __init__(self, profiles: ProfileRepository):
        self._profiles = profiles

    # -------- Reads --------
    def get_own(self, user_id: str) -> Optional[MemberProfile]:
        return self._profiles.get_by_user_id(user_id)

    def list_members(self) -> Sequence[MemberProfile]:
        return self._profiles.list_all()

    def available_spouses(self, user_id: str) -> Tuple[List[MemberProfile], Optional[str]]:
        """Profiles the caller may link as spouse, plus a warning code when none can be computed."""

        profile = self._profiles.get_by_user_id(user_id)
        if profile is None or profile.gender is None:
            return [], "missing_gender"
        rows = self._profiles.list_available_spouses(exclude_id=profile.id, gender=_OPPOSITE[profile.gender])
        return list(rows), None

    # -------- Writes --------
    def create(self, user: AuthUser, payload: Mapping[str, Any]) -> MemberProfile:
        if self._profiles.get_by_user_id(user.user_id) is not None:
            raise ConflictError("Profile already exists", code="PROFILE_EXISTS")
        require_fields(payload, PROFILE_REQUIRED_FIELDS)

        values, spouse_id = self._clean(payload, None, list(ProfileSection))
        if spouse_id is not _UNCHANGED and spouse_id is not None:
            self._check_spouse(None, spouse_id, values["gender"])

        profile = self._profiles.create({**values, "user_id": user.user_id})
        log.info("member profile created id=%s user_id=%s", profile.id, user.user_id)
        if spouse_id is not _UNCHANGED and spouse_id is not None:
            profile = self._link(profile, spouse_id)
        return profile

    def update_full(self, user: AuthUser, payload: Mapping[str, Any]) -> MemberProfile:
        profile = self._require_own(user.user_id)
        require_fields(payload, PROFILE_REQUIRED_FIELDS)
        expected = _parse_precondition(payload.get("updated_at"))
        return self._save(profile, payload, list(ProfileSection), expected)

    def update_section(self, user: AuthUser, body: Mapping[str, Any]) -> MemberProfile:
        """Partial update of one profile section.

        ``updated_at`` in the body, when given, must equal the stored value or
        the write is rejected with a conflict.
        """

        try:
            section = ProfileSection(body.get("section"))
        except ValueError:
            raise ValidationError(
                "section must be one of: " + ", ".join(s.value for s in ProfileSection),
                code="INVALID_SECTION",
                details={"field": "section"},
            ) from None

        fields = body.get("fields")
        if not isinstance(fields, dict) or not fields:
            raise ValidationError("fields must be a non-empty object", code="INVALID_FIELDS", details={"field": "fields"})
        outside = sorted(set(fields) - set(SECTION_FIELDS[section]))
        if outside:
            raise ValidationError(
                f"Fields not in section {section.value}: {', '.join(outside)}",
                code="FIELDS_OUTSIDE_SECTION",
                details={"fields": outside, "section": section.value},
            )

        expected = _parse_precondition(body.get("updated_at"))
        profile = self._require_own(user.user_id)
        if expected is not None and profile.updated_at != expected:
            raise self._stale(profile)
        return self._save(profile, fields, [section], expected)

    # -------- Maintenance --------
    def repair_spouse_links(self) -> List[SpouseRepair]:
        """Fix one-sided spouse pointers left behind by older, non-atomic writes."""

        profiles = {p.id: p for p in self._profiles.list_all()}
        spouse_of = {p.id: p.spouse_id for p in profiles.values()}
        repairs: List[SpouseRepair] = []

        for profile_id in list(spouse_of):
            spouse_id = spouse_of[profile_id]
            if not spouse_id:
                continue
            if spouse_id not in profiles:
                self._profiles.unlink_spouses(profile_id)
                spouse_of[profile_id] = None
                repairs.append(SpouseRepair(profile_id, spouse_id, "cleared_missing_spouse"))
            elif spouse_of[spouse_id] == profile_id:
                continue
            elif spouse_of[spouse_id] is None:
                self._profiles.link_spouses(profile_id, spouse_id)
                spouse_of[spouse_id] = profile_id
                repairs.append(SpouseRepair(profile_id, spouse_id, "completed_link"))
            else:
                self._profiles.unlink_spouses(profile_id)
                spouse_of[profile_id] = None
                repairs.append(SpouseRepair(profile_id, spouse_id, "cleared_conflicting_link"))

        for r in repairs:
            log.info("spouse repair profile_id=%s spouse_id=%s action=%s", r.profile_id, r.spouse_id, r.action)
        return repairs

    # -------- Internals --------
    def _require_own(self, user_id: str) -> MemberProfile:
        profile = self._profiles.get_by_user_id(user_id)
        if profile is None:
            raise NotFoundError("Profile not found", code="PROFILE_NOT_FOUND")
        return profile

    @staticmethod
    def _stale(profile: MemberProfile) -> ConflictError:
        return ConflictError(
            "Profile was changed since it was loaded",
            code="STALE_PROFILE",
            details={"current_updated_at": profile.updated_at.isoformat() if profile.updated_at else None},
        )

    def _save(
        self,
        profile: MemberProfile,
        payload: Mapping[str, Any],
        sections: Iterable[ProfileSection],
        expected: Optional[datetime],
    ) -> MemberProfile:
        values, spouse_id = self._clean(payload, profile, sections)
        changes_spouse = spouse_id is not _UNCHANGED and spouse_id != profile.spouse_id
        if changes_spouse and spouse_id is not None:
            self._check_spouse(profile, spouse_id, values.get("gender", profile.gender))

        updated = self._profiles.update(profile.id, values, expected_updated_at=expected)
        if updated is None:
            current = self._profiles.get_by_id(profile.id)
            if current is None:
                raise NotFoundError("Profile not found", code="PROFILE_NOT_FOUND")
            raise self._stale(current)

        if changes_spouse:
            if spouse_id is None:
                self._profiles.unlink_spouses(profile.id)
                log.info("spouse unlinked profile_id=%s", profile.id)
                updated = self._profiles.get_by_id(profile.id) or updated
            else:
                updated = self._link(updated, spouse_id)
        return updated

    def _link(self, profile: MemberProfile, spouse_id: str) -> MemberProfile:
        self._profiles.link_spouses(profile.id, spouse_id)
        log.info("spouse linked profile_id=%s spouse_id=%s", profile.id, spouse_id)
        return self._profiles.get_by_id(profile.id) or profile

    def _check_spouse(self, profile: Optional[MemberProfile], spouse_id: str, gender: Optional[Gender]) -> None:
        if profile is not None and spouse_id == profile.id:
            raise ValidationError("You cannot link yourself as spouse", code="SPOUSE_IS_SELF")
        spouse = self._profiles.get_by_id(spouse_id)
        if spouse is None:
            raise NotFoundError("Spouse profile not found", code="SPOUSE_NOT_FOUND")
        if spouse.spouse_id is not None and (profile is None or spouse.spouse_id != profile.id):
            raise ValidationError("This member is already linked to a spouse", code="SPOUSE_ALREADY_LINKED")
        if gender is None:
            raise ValidationError("Set your gender before linking a spouse", code="MISSING_GENDER")
        if spouse.gender != _OPPOSITE[gender]:
            raise ValidationError("Spouse must have the opposite gender", code="SPOUSE_GENDER_MISMATCH")

    def _clean(
        self,
        payload: Mapping[str, Any],
        current: Optional[MemberProfile],
        sections: Iterable[ProfileSection],
    ) -> Tuple[Dict[str, Any], Any]:
        """Validate the fields of ``sections`` present in ``payload``.

        Returns the column values to write and the requested spouse id
        (``_UNCHANGED`` when the payload does not mention it).
        """

        values: Dict[str, Any] = {}
        spouse_id: Any = _UNCHANGED
        sections = set(sections)

        if ProfileSection.PERSONAL in sections:
            if "name" in payload:
                values["name"] = require_non_empty(payload["name"], "name")
            if "gender" in payload:
                values["gender"] = _parse_gender(payload["gender"])
            if "date_of_birth" in payload:
                values["date_of_birth"] = validate_date_of_birth(payload["date_of_birth"])
            if "phone" in payload:
                values["phone"] = validate_phone(payload["phone"])
            if "email" in payload:
                values["email"] = validate_email(payload["email"]).lower()

        if ProfileSection.SPIRITUAL in sections:
            for key in ("is_baptized", "pays_tithe"):
                if key in payload:
                    values[key] = parse_bool(payload[key], key)
            if "life_group" in payload:
                values["life_group"] = _optional_text(payload["life_group"])

        if ProfileSection.VOLUNTEER in sections:
            if "volunteer_areas" in payload:
                values["volunteer_areas"] = validate_volunteer_areas(payload["volunteer_areas"])
            if "volunteer_outros_details" in payload:
                values["volunteer_outros_details"] = _optional_text(payload["volunteer_outros_details"])

            areas = values.get("volunteer_areas", list(current.volunteer_areas) if current else [])
            details = values.get(
                "volunteer_outros_details", current.volunteer_outros_details if current else None
            )
            if "outros" in areas and is_blank(details):
                raise ValidationError(
                    "Describe the other area you want to serve in",
                    code="MISSING_OUTROS_DETAILS",
                    details={"missing_fields": ["volunteer_outros_details"]},
                )
            if "volunteer_areas" in values and "outros" not in areas:
                values["volunteer_outros_details"] = None

        if ProfileSection.FAMILY in sections:
            if "is_married" in payload:
                values["is_married"] = bool(parse_bool(payload["is_married"], "is_married"))
            if "spouse_name" in payload:
                values["spouse_name"] = _optional_text(payload["spouse_name"])
            if "spouse_id" in payload:
                spouse_id = _optional_text(payload["spouse_id"])

        return values, spouse_id
