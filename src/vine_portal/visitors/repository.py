from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Protocol, Sequence, Tuple

from ..children.model import VisitorChild
from .model import Visitor


class VisitorRepository(Protocol):
    def register(
        self, values: Dict[str, Any], children: Sequence[Dict[str, Any]]
    ) -> Tuple[Visitor, List[VisitorChild]]:
        """Write the visitor and its children in one transaction."""

        raise NotImplementedError

    def list(self, *, from_date: Optional[date] = None, to_date: Optional[date] = None) -> Sequence[Visitor]:
        """Most recent visit first; bounds are inclusive."""

        raise NotImplementedError
