from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence

from .model import MemberChild, VisitorChild


class ChildRepository(Protocol):
    def list_for_parent(self, parent_id: str) -> Sequence[MemberChild]:
        """Children where the profile is parent1 or parent2, youngest last."""

        raise NotImplementedError

    def get_by_id(self, child_id: str) -> Optional[MemberChild]:
        raise NotImplementedError

    def create(self, values: Dict[str, Any]) -> MemberChild:
        raise NotImplementedError

    def update(self, child_id: str, values: Dict[str, Any]) -> Optional[MemberChild]:
        raise NotImplementedError

    def delete(self, child_id: str) -> bool:
        raise NotImplementedError


class VisitorChildRepository(Protocol):
    def search(self, term: Optional[str] = None) -> Sequence[VisitorChild]:
        raise NotImplementedError

    def get_by_id(self, child_id: str) -> Optional[VisitorChild]:
        raise NotImplementedError

    def create(self, values: Dict[str, Any]) -> VisitorChild:
        raise NotImplementedError

    def update(self, child_id: str, values: Dict[str, Any]) -> Optional[VisitorChild]:
        raise NotImplementedError
