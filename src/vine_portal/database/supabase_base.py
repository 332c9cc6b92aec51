from __future__ import annotations

import logging
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from postgrest.exceptions import APIError

from ..core.exceptions import BackendError
from .connection import BackendConnection

log = logging.getLogger(__name__)


def run(query, *, action: str) -> List[Dict[str, Any]]:
    """Execute a postgrest query builder and return its rows.

    SDK failures are re-raised as ``BackendError`` carrying the database
    code and message.
    """

    try:
        res = query.execute()
    except APIError as e:
        log.error("backend %s failed code=%s message=%s", action, e.code, e.message)
        raise BackendError(f"Failed to {action}", db_code=e.code, db_message=e.message) from e
    data = res.data
    if data is None:
        return []
    if isinstance(data, dict):
        return [data]
    return list(data)


def first(rows: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    return rows[0] if rows else None


class SupabaseRepository:
    """Base for repositories backed by one table."""

    table_name = ""

    def __init__(self, conn: BackendConnection):
        self._conn = conn

    def _table(self, name: Optional[str] = None):
        return self._conn.admin().table(name or self.table_name)


def parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def parse_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def to_json_value(value: Any) -> Any:
    """Convert python values to what the REST layer accepts."""

    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def to_row(values: Dict[str, Any]) -> Dict[str, Any]:
    return {k: to_json_value(v) for k, v in values.items()}
