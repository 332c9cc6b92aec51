from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence

from .model import Volunteer


class VolunteerRepository(Protocol):
    def create(self, values: Dict[str, Any]) -> Volunteer:
        raise NotImplementedError

    def list(self, *, area: Optional[str] = None) -> Sequence[Volunteer]:
        """Newest first, optionally only those offering ``area``."""

        raise NotImplementedError
