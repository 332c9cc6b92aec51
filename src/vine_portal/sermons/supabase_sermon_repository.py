from __future__ import annotations

import re
from typing import Any, Dict, Optional, Sequence, Tuple

from postgrest.exceptions import APIError

from ..common.datetime_utils import now_utc
from ..core.constants import TABLE_SERMONS
from ..core.exceptions import BackendError
from ..database.supabase_base import SupabaseRepository, first, parse_date, run, to_row
from .model import Sermon
from .repository import SermonRepository

# PostgREST answer to a range starting beyond the last row
RANGE_NOT_SATISFIABLE = "PGRST103"


def _to_sermon(r: Dict[str, Any]) -> Sermon:
    return Sermon(
        id=str(r["id"]),
        title_pt=r["title_pt"],
        title_en=r["title_en"],
        preacher=r["preacher"],
        date=parse_date(r["date"]),
        excerpt_pt=r.get("excerpt_pt") or "",
        excerpt_en=r.get("excerpt_en") or "",
        content_pt=r.get("content_pt") or "",
        content_en=r.get("content_en") or "",
        scripture=r.get("scripture"),
        series=r.get("series"),
        tags=tuple(r.get("tags") or ()),
    )


class SupabaseSermonRepository(SupabaseRepository, SermonRepository):
    table_name = TABLE_SERMONS

    def _filtered(self, q: Optional[str], columns: str = "*"):
        query = self._table().select(columns, count="exact")
        if q:
            safe = re.sub(r"[,()*]", " ", q).strip()
            if safe:
                query = query.or_(f"title_pt.ilike.*{safe}*,title_en.ilike.*{safe}*,preacher.ilike.*{safe}*")
        return query

    def list_page(self, *, q: Optional[str], offset: int, limit: int) -> Tuple[Sequence[Sermon], int]:
        query = self._filtered(q).order("date", desc=True).range(offset, offset + limit - 1)
        try:
            res = query.execute()
        except APIError as e:
            if e.code != RANGE_NOT_SATISFIABLE:
                raise BackendError("Failed to list sermons", db_code=e.code, db_message=e.message) from e
            # page past the end: no rows, but the real total
            return [], self._count(q)
        rows = res.data or []
        total = res.count if res.count is not None else len(rows)
        return [_to_sermon(r) for r in rows], total

    def _count(self, q: Optional[str]) -> int:
        try:
            res = self._filtered(q, "id").limit(1).execute()
        except APIError as e:
            raise BackendError("Failed to count sermons", db_code=e.code, db_message=e.message) from e
        return res.count or 0

    def get_by_id(self, sermon_id: str) -> Optional[Sermon]:
        r = first(run(self._table().select("*").eq("id", sermon_id).limit(1), action="load sermon"))
        return _to_sermon(r) if r else None

    def create(self, values: Dict[str, Any]) -> Sermon:
        return _to_sermon(run(self._table().insert(to_row(values)), action="create sermon")[0])

    def update(self, sermon_id: str, values: Dict[str, Any]) -> Optional[Sermon]:
        payload = to_row({**values, "updated_at": now_utc()})
        r = first(run(self._table().update(payload).eq("id", sermon_id), action="update sermon"))
        return _to_sermon(r) if r else None

    def delete(self, sermon_id: str) -> bool:
        return bool(run(self._table().delete().eq("id", sermon_id), action="delete sermon"))
