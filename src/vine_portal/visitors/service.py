from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..children.model import VisitorChild
from ..children.service import clean_visitor_child
from ..common.validators import is_blank, require_fields, require_non_empty, validate_optional_date, validate_phone
from ..core.constants import MAX_VISITOR_CHILD_AGE
from ..core.enums import HowFound
from ..core.exceptions import ValidationError
from .model import Visitor
from .repository import VisitorRepository

log = logging.getLogger(__name__)

REQUIRED_FIELDS = ("visit_date", "name", "phone", "how_found")
_NEEDS_DETAILS = {HowFound.FRIEND, HowFound.OTHER}


class VisitorService:
    """Public visitor registration and the leaders' visitor report."""

    def __init__(self, visitors: VisitorRepository):
        self._visitors = visitors

    def register(self, payload: Mapping[str, Any]) -> Tuple[Visitor, List[VisitorChild]]:
        require_fields(payload, REQUIRED_FIELDS)
        values = self._clean(payload)
        children = self._clean_children(payload.get("children"), values)

        visitor, created = self._visitors.register(values, children)
        log.info("visitor registered id=%s children=%d", visitor.id, len(created))
        return visitor, created

    def list(self, *, from_date: Optional[str] = None, to_date: Optional[str] = None) -> Sequence[Visitor]:
        start = validate_optional_date(from_date, "from_date")
        end = validate_optional_date(to_date, "to_date")
        if start and end and start > end:
            raise ValidationError("from_date must not be after to_date", code="INVALID_DATE_RANGE")
        return self._visitors.list(from_date=start, to_date=end)

    @staticmethod
    def _clean(payload: Mapping[str, Any]) -> Dict[str, Any]:
        try:
            how_found = HowFound(payload["how_found"])
        except ValueError:
            raise ValidationError(
                "how_found must be one of: " + ", ".join(h.value for h in HowFound),
                code="INVALID_HOW_FOUND",
                details={"field": "how_found"},
            ) from None
        details = None if is_blank(payload.get("how_found_details")) else str(payload["how_found_details"]).strip()
        if how_found in _NEEDS_DETAILS and details is None:
            raise ValidationError(
                "Tell us who invited you or how you found us",
                code="MISSING_HOW_FOUND_DETAILS",
                details={"missing_fields": ["how_found_details"]},
            )
        return {
            "visit_date": validate_optional_date(payload["visit_date"], "visit_date"),
            "name": require_non_empty(payload["name"], "name"),
            "phone": validate_phone(payload["phone"]),
            "how_found": how_found,
            "how_found_details": details,
        }

    @staticmethod
    def _clean_children(raw: Any, visitor: Mapping[str, Any]) -> List[Dict[str, Any]]:
        """Validate every child before anything is written."""

        if raw is None:
            return []
        if not isinstance(raw, list):
            raise ValidationError("children must be a list", details={"field": "children"})
        cleaned = []
        for index, child in enumerate(raw):
            if not isinstance(child, dict):
                raise ValidationError("Each child must be an object", details={"field": f"children[{index}]"})
            entry = {**child, "parent_name": visitor["name"], "parent_phone": visitor["phone"]}
            try:
                require_fields(entry, ("name", "date_of_birth"))
                values = clean_visitor_child(entry, max_age=MAX_VISITOR_CHILD_AGE)
            except ValidationError as e:
                e.details["child_index"] = index
                raise
            values.setdefault("photo_permission", False)
            cleaned.append(values)
        return cleaned
