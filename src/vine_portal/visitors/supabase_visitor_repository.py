from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..children.model import VisitorChild
from ..children.supabase_child_repository import to_visitor_child
from ..core.constants import TABLE_VISITORS
from ..core.enums import HowFound
from ..database.supabase_base import SupabaseRepository, parse_date, parse_timestamp, run, to_row
from .model import Visitor
from .repository import VisitorRepository


def _to_visitor(r: Dict[str, Any]) -> Visitor:
    return Visitor(
        id=str(r["id"]),
        visit_date=parse_date(r["visit_date"]),
        name=r["name"],
        phone=r["phone"],
        how_found=HowFound(r["how_found"]),
        how_found_details=r.get("how_found_details"),
        created_at=parse_timestamp(r.get("created_at")),
    )


class SupabaseVisitorRepository(SupabaseRepository, VisitorRepository):
    table_name = TABLE_VISITORS

    def register(
        self, values: Dict[str, Any], children: Sequence[Dict[str, Any]]
    ) -> Tuple[Visitor, List[VisitorChild]]:
        params = {"visitor_row": to_row(values), "child_rows": [to_row(c) for c in children]}
        result = run(self._conn.admin().rpc("register_visitor", params), action="register visitor")[0]
        return _to_visitor(result["visitor"]), [to_visitor_child(r) for r in result.get("children") or []]

    def list(self, *, from_date: Optional[date] = None, to_date: Optional[date] = None) -> Sequence[Visitor]:
        query = self._table().select("*")
        if from_date is not None:
            query = query.gte("visit_date", from_date.isoformat())
        if to_date is not None:
            query = query.lte("visit_date", to_date.isoformat())
        rows = run(query.order("visit_date", desc=True).order("created_at", desc=True), action="list visitors")
        return [_to_visitor(r) for r in rows]
