from __future__ import annotations

from datetime import date

import pytest

from vine_portal.core.enums import DataSource
from vine_portal.core.exceptions import BackendError, BackendNotConfiguredError, ConflictError, NotFoundError, ValidationError
from vine_portal.sermons.model import Sermon
from vine_portal.sermons.service import SermonService
from vine_portal.sermons.static_data import STATIC_SERMONS


def _sermon(sid, day):
    return Sermon(
        id=sid,
        title_pt="Graça",
        title_en="Grace",
        preacher="Pr. Teste",
        date=day,
        excerpt_pt="e",
        excerpt_en="e",
        content_pt="c",
        content_en="c",
    )


class InMemorySermons:
    def __init__(self, sermons=(), fail_with=None):
        self.rows = {s.id: s for s in sermons}
        self.fail_with = fail_with

    def list_page(self, *, q, offset, limit):
        if self.fail_with:
            raise self.fail_with
        items = sorted(self.rows.values(), key=lambda s: s.date, reverse=True)
        if q:
            items = [s for s in items if s.matches(q)]
        return items[offset:offset + limit], len(items)

    def get_by_id(self, sermon_id):
        if self.fail_with:
            raise self.fail_with
        return self.rows.get(sermon_id)

    def create(self, values):
        sermon = Sermon(**values)
        self.rows[sermon.id] = sermon
        return sermon


def test_empty_table_serves_static_sermons_newest_first():
    page = SermonService(InMemorySermons(), page_size=2).list_page(page=1)

    assert page.source == DataSource.STATIC
    assert page.total == len(STATIC_SERMONS)
    assert [s.date for s in page.items] == sorted((s.date for s in STATIC_SERMONS), reverse=True)[:2]
    assert page.pagination()["total_pages"] == 2


@pytest.mark.parametrize("error", [BackendError("boom", db_code="57014"), BackendNotConfiguredError("off")])
def test_backend_failure_falls_back_to_static(error):
    page = SermonService(InMemorySermons(fail_with=error)).list_page(q="vine")
    assert page.source == DataSource.STATIC
    assert [s.id for s in page.items] == ["a-videira-e-os-ramos"]


def test_database_rows_win_when_present():
    repo = InMemorySermons([_sermon("graca", date(2025, 5, 4))])
    page = SermonService(repo).list_page()
    assert page.source == DataSource.DATABASE
    assert [s.id for s in page.items] == ["graca"]


def test_search_without_matches_in_database_is_empty_not_static():
    repo = InMemorySermons([_sermon("graca", date(2025, 5, 4))])
    page = SermonService(repo).list_page(q="nothing-like-this")
    assert page.source == DataSource.DATABASE
    assert page.items == []
    assert page.pagination()["total_pages"] == 1


def test_get_falls_back_to_static_then_not_found():
    svc = SermonService(InMemorySermons())
    sermon, source = svc.get("fe-que-persevera")
    assert source == DataSource.STATIC
    assert sermon.to_localized()["title"]["en"] == "Faith that Perseveres"

    with pytest.raises(NotFoundError) as exc:
        svc.get("missing")
    assert exc.value.code == "SERMON_NOT_FOUND"


def test_create_validates_slug_and_uniqueness():
    repo = InMemorySermons([_sermon("graca", date(2025, 5, 4))])
    svc = SermonService(repo)
    payload = {
        "id": "Nova-Vida",
        "date": "2025-05-11",
        "title_pt": "Nova Vida",
        "title_en": "New Life",
        "preacher": "Pr. Teste",
        "excerpt_pt": "e",
        "excerpt_en": "e",
        "content_pt": "c",
        "content_en": "c",
        "tags": ["vida", " "],
    }

    created = svc.create(payload)
    assert created.id == "nova-vida"
    assert created.date == date(2025, 5, 11)
    assert created.tags == ["vida"]

    with pytest.raises(ConflictError):
        svc.create({**payload, "id": "graca"})
    with pytest.raises(ValidationError) as exc:
        svc.create({**payload, "id": "no spaces allowed"})
    assert exc.value.code == "INVALID_SLUG"
