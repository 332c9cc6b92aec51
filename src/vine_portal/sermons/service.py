from __future__ import annotations

import logging
import re
from typing import Any, Dict, Mapping, Optional

from ..common.validators import is_blank, require_fields, require_non_empty, validate_optional_date
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import DataSource
from ..core.exceptions import BackendError, ConflictError, NotFoundError, ValidationError
from .model import Sermon, SermonPage
from .repository import SermonRepository
from .static_data import sorted_static_sermons

log = logging.getLogger(__name__)

_SLUG = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_TEXT_FIELDS = ("title_pt", "title_en", "preacher", "excerpt_pt", "excerpt_en", "content_pt", "content_en")
REQUIRED_FIELDS = ("id", "date") + _TEXT_FIELDS


class SermonService:
    """Sermon archive with the bundled sermons as fallback for reads."""

    def __init__(self, sermons: SermonRepository, *, page_size: int = DEFAULT_PAGE_SIZE):
        self._sermons = sermons
        self._page_size = page_size

    def list_page(self, *, page: int = 1, per_page: Optional[int] = None, q: Optional[str] = None) -> SermonPage:
        per_page = per_page or self._page_size
        q = (q or "").strip() or None
        offset = (page - 1) * per_page
        try:
            rows, total = self._sermons.list_page(q=q, offset=offset, limit=per_page)
        except BackendError as e:
            log.warning("sermons from database unavailable, serving static list: %s", e.message)
        else:
            # an empty table means nothing was published yet
            if total > 0 or q:
                return SermonPage(list(rows), total, page, per_page, DataSource.DATABASE)
        return self._static_page(page=page, per_page=per_page, q=q)

    @staticmethod
    def _static_page(*, page: int, per_page: int, q: Optional[str]) -> SermonPage:
        items = [s for s in sorted_static_sermons() if not q or s.matches(q)]
        start = (page - 1) * per_page
        return SermonPage(items[start:start + per_page], len(items), page, per_page, DataSource.STATIC)

    def get(self, sermon_id: str) -> tuple[Sermon, DataSource]:
        try:
            sermon = self._sermons.get_by_id(sermon_id)
        except BackendError as e:
            log.warning("sermon %s from database unavailable: %s", sermon_id, e.message)
            sermon = None
        if sermon is not None:
            return sermon, DataSource.DATABASE
        for s in sorted_static_sermons():
            if s.id == sermon_id:
                return s, DataSource.STATIC
        raise NotFoundError("Sermon not found", code="SERMON_NOT_FOUND")

    def create(self, payload: Mapping[str, Any]) -> Sermon:
        require_fields(payload, REQUIRED_FIELDS)
        values = self._clean(payload)
        if not _SLUG.match(values["id"]):
            raise ValidationError(
                "id must be a lowercase slug like 'faith-and-growth'",
                code="INVALID_SLUG",
                details={"field": "id"},
            )
        if self._sermons.get_by_id(values["id"]) is not None:
            raise ConflictError("A sermon with this id already exists", code="SERMON_EXISTS")
        sermon = self._sermons.create(values)
        log.info("sermon created id=%s", sermon.id)
        return sermon

    def update(self, sermon_id: str, payload: Mapping[str, Any]) -> Sermon:
        values = self._clean({k: v for k, v in payload.items() if k != "id"})
        if not values:
            raise ValidationError("Nothing to update", code="EMPTY_UPDATE")
        sermon = self._sermons.update(sermon_id, values)
        if sermon is None:
            raise NotFoundError("Sermon not found", code="SERMON_NOT_FOUND")
        log.info("sermon updated id=%s", sermon_id)
        return sermon

    def delete(self, sermon_id: str) -> None:
        if not self._sermons.delete(sermon_id):
            raise NotFoundError("Sermon not found", code="SERMON_NOT_FOUND")
        log.info("sermon deleted id=%s", sermon_id)

    @staticmethod
    def _clean(payload: Mapping[str, Any]) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        if "id" in payload:
            values["id"] = require_non_empty(payload["id"], "id").lower()
        for key in _TEXT_FIELDS:
            if key in payload:
                values[key] = require_non_empty(payload[key], key)
        if "date" in payload:
            values["date"] = validate_optional_date(payload["date"], "date")
            if values["date"] is None:
                raise ValidationError("date is required", details={"missing_fields": ["date"]})
        for key in ("scripture", "series"):
            if key in payload:
                values[key] = None if is_blank(payload[key]) else str(payload[key]).strip()
        if "tags" in payload:
            tags = payload["tags"] or []
            if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
                raise ValidationError("tags must be a list of strings", details={"field": "tags"})
            values["tags"] = [t.strip() for t in tags if t.strip()]
        return values
