from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from ..auth.model import AuthUser
from ..common.validators import (
    is_blank,
    parse_bool,
    require_fields,
    require_non_empty,
    validate_date_of_birth,
    validate_email,
    validate_phone,
)
from ..core.constants import MAX_PERSON_AGE
from ..core.enums import STAFF_ROLES, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..profiles.repository import ProfileRepository
from ..users.service import RoleService
from .model import MemberChild, VisitorChild
from .repository import ChildRepository, VisitorChildRepository

log = logging.getLogger(__name__)


def _optional_text(payload: Mapping[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


class ChildService:
    """Member children, managed by their parents (or an admin)."""

    def __init__(self, children: ChildRepository, profiles: ProfileRepository, roles: RoleService):
        self._children = children
        self._profiles = profiles
        self._roles = roles

    def _authorize(self, user: AuthUser, parent_ids: Iterable[Optional[str]], *, extra_roles=frozenset()) -> None:
        profile = self._profiles.get_by_user_id(user.user_id)
        if profile is not None and profile.id in {p for p in parent_ids if p}:
            return
        role = self._roles.get_role(user.user_id)
        if role == Role.ADMIN or role in extra_roles:
            return
        raise AuthorizationError("Only the child's parents can manage this record")

    def list_for_parent(self, user: AuthUser, parent_id: Optional[str]) -> Sequence[MemberChild]:
        if is_blank(parent_id):
            raise ValidationError("parent_id is required", code="MISSING_PARENT_ID", details={"missing_fields": ["parent_id"]})
        # the check-in desk looks children up by parent too
        self._authorize(user, [parent_id], extra_roles=STAFF_ROLES)
        return self._children.list_for_parent(parent_id)

    def create(self, user: AuthUser, payload: Mapping[str, Any]) -> MemberChild:
        require_fields(payload, ("date_of_birth", "parent1_id"))
        values = self._clean(payload)
        self._check_parents(user, values)
        values.setdefault("photo_permission", True)
        child = self._children.create(values)
        log.info("child created id=%s parent1_id=%s", child.id, child.parent1_id)
        return child

    def update(self, user: AuthUser, payload: Mapping[str, Any]) -> MemberChild:
        child = self._require(payload.get("id"))
        self._authorize(user, [child.parent1_id, child.parent2_id])
        values = self._clean(payload)
        self._check_parents(user, values, current=child)
        updated = self._children.update(child.id, values)
        if updated is None:
            raise NotFoundError("Child not found", code="CHILD_NOT_FOUND")
        return updated

    def delete(self, user: AuthUser, child_id: Optional[str]) -> None:
        child = self._require(child_id)
        self._authorize(user, [child.parent1_id, child.parent2_id])
        self._children.delete(child.id)
        log.info("child deleted id=%s by user_id=%s", child.id, user.user_id)

    def _check_parents(
        self, user: AuthUser, values: Mapping[str, Any], *, current: Optional[MemberChild] = None
    ) -> None:
        """Parent ids must point at existing profiles; parent1 changes follow the create rule."""

        for key in ("parent1_id", "parent2_id"):
            parent_id = values.get(key)
            if parent_id and self._profiles.get_by_id(parent_id) is None:
                raise NotFoundError("Parent profile not found", code="PARENT_NOT_FOUND", details={"field": key})
        if "parent1_id" in values and (current is None or values["parent1_id"] != current.parent1_id):
            self._authorize(user, [values["parent1_id"]])
        if current is not None:
            # the caller must still be a parent once the change is applied
            self._authorize(
                user,
                [values.get("parent1_id", current.parent1_id), values.get("parent2_id", current.parent2_id)],
            )

    def _require(self, child_id: Optional[str]) -> MemberChild:
        if is_blank(child_id):
            raise ValidationError("child id is required", code="MISSING_ID", details={"missing_fields": ["id"]})
        child = self._children.get_by_id(str(child_id))
        if child is None:
            raise NotFoundError("Child not found", code="CHILD_NOT_FOUND")
        return child

    @staticmethod
    def _clean(payload: Mapping[str, Any]) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        name = _optional_text(payload, "name")
        # a blank name keeps the stored one
        if name is not None:
            values["name"] = name
        if "date_of_birth" in payload:
            dob = validate_date_of_birth(payload["date_of_birth"], max_age=MAX_PERSON_AGE)
            if dob is None:
                raise ValidationError("date_of_birth is required", details={"missing_fields": ["date_of_birth"]})
            values["date_of_birth"] = dob
        if "parent1_id" in payload:
            values["parent1_id"] = require_non_empty(payload["parent1_id"], "parent1_id")
        if "parent2_id" in payload:
            values["parent2_id"] = _optional_text(payload, "parent2_id")
        for key in ("allergies", "medical_notes", "special_needs"):
            if key in payload:
                values[key] = _optional_text(payload, key)
        if "photo_permission" in payload:
            values["photo_permission"] = parse_bool(payload["photo_permission"], "photo_permission")
        return values


def clean_visitor_child(payload: Mapping[str, Any], *, max_age: int = MAX_PERSON_AGE) -> Dict[str, Any]:
    """Validate the visitor child fields present in ``payload``."""

    values: Dict[str, Any] = {}
    for key in ("name", "parent_name"):
        if key in payload:
            values[key] = require_non_empty(payload[key], key)
    if "date_of_birth" in payload:
        dob = validate_date_of_birth(payload["date_of_birth"], max_age=max_age)
        if dob is None:
            raise ValidationError("date_of_birth is required", details={"missing_fields": ["date_of_birth"]})
        values["date_of_birth"] = dob
    if "parent_phone" in payload:
        values["parent_phone"] = validate_phone(payload["parent_phone"], "parent_phone")
    if "parent_email" in payload:
        email = _optional_text(payload, "parent_email")
        values["parent_email"] = validate_email(email, "parent_email").lower() if email else None
    for key in ("allergies", "special_needs", "emergency_contact_name"):
        if key in payload:
            values[key] = _optional_text(payload, key)
    if "emergency_contact_phone" in payload:
        phone = _optional_text(payload, "emergency_contact_phone")
        values["emergency_contact_phone"] = validate_phone(phone, "emergency_contact_phone") if phone else None
    if "photo_permission" in payload:
        values["photo_permission"] = bool(parse_bool(payload["photo_permission"], "photo_permission"))
    return values


class VisitorChildService:
    """Children of visitors; created at the check-in desk or from visitor registration."""

    REQUIRED = ("name", "date_of_birth", "parent_name", "parent_phone")

    def __init__(self, visitor_children: VisitorChildRepository):
        self._visitor_children = visitor_children

    def search(self, term: Optional[str] = None) -> Sequence[VisitorChild]:
        term = (term or "").strip() or None
        return self._visitor_children.search(term)

    def create(self, payload: Mapping[str, Any], *, max_age: int = MAX_PERSON_AGE) -> VisitorChild:
        require_fields(payload, self.REQUIRED)
        values = clean_visitor_child(payload, max_age=max_age)
        values.setdefault("photo_permission", False)
        child = self._visitor_children.create(values)
        log.info("visitor child created id=%s", child.id)
        return child

    def update(self, payload: Mapping[str, Any]) -> VisitorChild:
        child_id = payload.get("id")
        if is_blank(child_id):
            raise ValidationError("visitor child id is required", code="MISSING_ID", details={"missing_fields": ["id"]})
        if self._visitor_children.get_by_id(str(child_id)) is None:
            raise NotFoundError("Visitor child not found", code="VISITOR_CHILD_NOT_FOUND")
        values = clean_visitor_child({k: v for k, v in payload.items() if k != "id"})
        updated = self._visitor_children.update(str(child_id), values)
        if updated is None:
            raise NotFoundError("Visitor child not found", code="VISITOR_CHILD_NOT_FOUND")
        return updated
