from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Tuple

from ..core.enums import DataSource


@dataclass(frozen=True)
class Sermon:
    id: str
    title_pt: str
    title_en: str
    preacher: str
    date: date
    excerpt_pt: str
    excerpt_en: str
    content_pt: str
    content_en: str
    scripture: Optional[str] = None
    series: Optional[str] = None
    tags: Tuple[str, ...] = field(default_factory=tuple)

    def to_localized(self) -> dict:
        """Shape consumed by the sermon pages."""
        return {
            "id": self.id,
            "title": {"pt": self.title_pt, "en": self.title_en},
            "preacher": self.preacher,
            "date": self.date.isoformat(),
            "excerpt": {"pt": self.excerpt_pt, "en": self.excerpt_en},
            "content": {"pt": self.content_pt, "en": self.content_en},
            "scripture": self.scripture,
            "series": self.series,
            "tags": list(self.tags),
        }

    def matches(self, q: str) -> bool:
        needle = q.lower()
        haystack = (self.title_pt, self.title_en, self.preacher, self.scripture or "")
        return any(needle in h.lower() for h in haystack)


@dataclass(frozen=True)
class SermonPage:
    items: List[Sermon]
    total: int
    page: int
    per_page: int
    source: DataSource

    @property
    def total_pages(self) -> int:
        return max(1, -(-self.total // self.per_page))

    def pagination(self) -> dict:
        return {
            "page": self.page,
            "per_page": self.per_page,
            "total": self.total,
            "total_pages": self.total_pages,
        }
