from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence

from .model import ScheduleEvent


class ScheduleEventRepository(Protocol):
    def list_active(self) -> Sequence[ScheduleEvent]:
        """Active events ordered by type, day of week (empty last) and display order."""

        raise NotImplementedError

    def get_by_id(self, event_id: str) -> Optional[ScheduleEvent]:
        raise NotImplementedError

    def create(self, values: Dict[str, Any]) -> ScheduleEvent:
        raise NotImplementedError

    def update(self, event_id: str, values: Dict[str, Any]) -> Optional[ScheduleEvent]:
        raise NotImplementedError

    def delete(self, event_id: str) -> bool:
        raise NotImplementedError
