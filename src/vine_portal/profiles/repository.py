from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Protocol, Sequence

from ..core.enums import Gender
from .model import MemberProfile


class ProfileRepository(Protocol):
    def get_by_user_id(self, user_id: str) -> Optional[MemberProfile]:
        raise NotImplementedError

    def get_by_id(self, profile_id: str) -> Optional[MemberProfile]:
        raise NotImplementedError

    def list_all(self) -> Sequence[MemberProfile]:
        """All profiles, newest first."""

        raise NotImplementedError

    def list_available_spouses(self, *, exclude_id: str, gender: Gender) -> Sequence[MemberProfile]:
        raise NotImplementedError

    def create(self, values: Dict[str, Any]) -> MemberProfile:
        raise NotImplementedError

    def update(
        self,
        profile_id: str,
        values: Dict[str, Any],
        *,
        expected_updated_at: Optional[datetime] = None,
    ) -> Optional[MemberProfile]:
        """Write ``values``; returns None when no row matched (missing id or stale ``updated_at``)."""

        raise NotImplementedError

    def link_spouses(self, profile_a: str, profile_b: str) -> None:
        """Link both profiles in one transaction."""

        raise NotImplementedError

    def unlink_spouses(self, profile_id: str) -> None:
        raise NotImplementedError
