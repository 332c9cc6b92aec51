from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence, Tuple

from .model import Sermon


class SermonRepository(Protocol):
    def list_page(self, *, q: Optional[str], offset: int, limit: int) -> Tuple[Sequence[Sermon], int]:
        """One page ordered by date descending, plus the total row count."""

        raise NotImplementedError

    def get_by_id(self, sermon_id: str) -> Optional[Sermon]:
        raise NotImplementedError

    def create(self, values: Dict[str, Any]) -> Sermon:
        raise NotImplementedError

    def update(self, sermon_id: str, values: Dict[str, Any]) -> Optional[Sermon]:
        raise NotImplementedError

    def delete(self, sermon_id: str) -> bool:
        raise NotImplementedError
