from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timezone
from typing import Optional

import pytest

from vine_portal.auth.model import AuthUser
from vine_portal.checkins.model import CheckIn, CheckInView
from vine_portal.checkins.service import CheckInService
from vine_portal.children.model import MemberChild, VisitorChild
from vine_portal.core.enums import CheckInStatus, ChildType
from vine_portal.core.exceptions import ConflictError, NotFoundError, ValidationError
from vine_portal.profiles.model import MemberProfile

NOW = datetime(2025, 3, 9, 13, 15, tzinfo=timezone.utc)


class InMemoryCheckIns:
    def __init__(self):
        self.rows: dict[str, CheckIn] = {}
        self._id = 0
        self.lose_checkout_race = False

    def create(self, values):
        self._id += 1
        rec = CheckIn(id=f"ci-{self._id}", **values)
        self.rows[rec.id] = rec
        return rec

    def get_by_id(self, check_in_id: str) -> Optional[CheckIn]:
        return self.rows.get(check_in_id)

    def mark_checked_out(self, check_in_id, *, checked_out_by, checked_out_by_name, checked_out_at, checkout_notes=None):
        rec = self.rows.get(check_in_id)
        if rec is None or rec.status != CheckInStatus.CHECKED_IN or self.lose_checkout_race:
            return None
        rec = replace(
            rec,
            status=CheckInStatus.CHECKED_OUT,
            checked_out_by=checked_out_by,
            checked_out_by_name=checked_out_by_name,
            checked_out_at=checked_out_at,
            checkout_notes=checkout_notes,
        )
        self.rows[check_in_id] = rec
        return rec

    def list_views(self, *, status=None, from_date=None, to_date=None, service_date=None):
        self.last_filters = {"status": status, "from_date": from_date, "to_date": to_date, "service_date": service_date}
        return [CheckInView(check_in=r, child_name=None, parent_name=None, parent_phone=None) for r in self.rows.values()]


class InMemoryChildren:
    def __init__(self, children):
        self.children = {c.id: c for c in children}

    def get_by_id(self, child_id):
        return self.children.get(child_id)


class InMemoryProfiles:
    def __init__(self, profiles):
        self.by_user = {p.user_id: p for p in profiles}

    def get_by_user_id(self, user_id):
        return self.by_user.get(user_id)


def _service(profiles=()):
    check_ins = InMemoryCheckIns()
    children = InMemoryChildren([MemberChild(id="c1", name="Davi", date_of_birth=date(2019, 4, 2), parent1_id="p1")])
    visitors = InMemoryChildren(
        [VisitorChild(id="v1", name="Lia", date_of_birth=date(2020, 1, 5), parent_name="Rosa", parent_phone="5191234567")]
    )
    svc = CheckInService(check_ins, children, visitors, InMemoryProfiles(profiles), clock=lambda: NOW)
    return svc, check_ins


TEACHER = AuthUser(user_id="t1", email="marta@vine.church", metadata_name="Marta (auth)")


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"member_child_id": "c1", "visitor_child_id": "v1"},
        {"member_child_id": "  ", "visitor_child_id": None},
    ],
)
def test_check_in_requires_exactly_one_child(payload):
    svc, check_ins = _service()
    with pytest.raises(ValidationError) as exc:
        svc.check_in(TEACHER, payload)
    assert exc.value.code == "INVALID_CHILD_REFERENCE"
    assert check_ins.rows == {}


def test_check_in_member_child_uses_profile_name_and_today():
    profile = MemberProfile(id="p9", user_id="t1", name="Marta Silva")
    svc, _ = _service([profile])

    rec = svc.check_in(TEACHER, {"member_child_id": "c1", "service_time": "10:00"})

    assert rec.status == CheckInStatus.CHECKED_IN
    assert rec.child_type == ChildType.MEMBER
    assert rec.checked_in_by == "t1"
    assert rec.checked_in_by_name == "Marta Silva"
    assert rec.checked_in_at == NOW
    assert rec.service_date == date(2025, 3, 9)
    assert rec.service_time == "10:00"


def test_check_in_visitor_child_with_explicit_service_date():
    svc, _ = _service()
    rec = svc.check_in(TEACHER, {"visitor_child_id": "v1", "service_date": "2025-03-02"})
    assert rec.child_type == ChildType.VISITOR
    assert rec.service_date == date(2025, 3, 2)


def test_staff_name_falls_back_to_metadata_then_email_then_generic():
    svc, _ = _service()
    assert svc.check_in(TEACHER, {"member_child_id": "c1"}).checked_in_by_name == "Marta (auth)"

    by_email = AuthUser(user_id="t2", email="joao@vine.church")
    assert svc.check_in(by_email, {"member_child_id": "c1"}).checked_in_by_name == "joao@vine.church"

    anonymous = AuthUser(user_id="t3")
    assert svc.check_in(anonymous, {"member_child_id": "c1"}).checked_in_by_name == "Teacher"


def test_check_in_unknown_child_is_not_found():
    svc, check_ins = _service()
    with pytest.raises(NotFoundError) as exc:
        svc.check_in(TEACHER, {"member_child_id": "nope"})
    assert exc.value.code == "CHILD_NOT_FOUND"
    with pytest.raises(NotFoundError) as exc:
        svc.check_in(TEACHER, {"visitor_child_id": "nope"})
    assert exc.value.code == "VISITOR_CHILD_NOT_FOUND"
    assert check_ins.rows == {}


def test_check_out_sets_all_checkout_fields():
    svc, _ = _service()
    rec = svc.check_in(TEACHER, {"member_child_id": "c1"})

    out = svc.check_out(TEACHER, {"id": rec.id, "checkout_notes": "picked up by mom"})

    assert out.status == CheckInStatus.CHECKED_OUT
    assert out.checked_out_by == "t1"
    assert out.checked_out_by_name == "Marta (auth)"
    assert out.checked_out_at == NOW
    assert out.checkout_notes == "picked up by mom"


def test_second_check_out_is_a_conflict():
    svc, _ = _service()
    rec = svc.check_in(TEACHER, {"member_child_id": "c1"})
    svc.check_out(TEACHER, {"id": rec.id})

    with pytest.raises(ConflictError) as exc:
        svc.check_out(TEACHER, {"id": rec.id})
    assert exc.value.code == "ALREADY_CHECKED_OUT"


def test_check_out_losing_concurrent_write_is_a_conflict():
    svc, check_ins = _service()
    rec = svc.check_in(TEACHER, {"member_child_id": "c1"})
    check_ins.lose_checkout_race = True

    with pytest.raises(ConflictError):
        svc.check_out(TEACHER, {"id": rec.id})
    assert check_ins.rows[rec.id].status == CheckInStatus.CHECKED_IN


def test_check_out_missing_or_unknown_id():
    svc, _ = _service()
    with pytest.raises(ValidationError) as exc:
        svc.check_out(TEACHER, {})
    assert exc.value.code == "MISSING_ID"
    with pytest.raises(NotFoundError) as exc:
        svc.check_out(TEACHER, {"id": "ci-404"})
    assert exc.value.code == "CHECK_IN_NOT_FOUND"


def test_list_validates_filters():
    svc, check_ins = _service()
    with pytest.raises(ValidationError) as exc:
        svc.list_views(status="sleeping")
    assert exc.value.code == "INVALID_STATUS"
    with pytest.raises(ValidationError) as exc:
        svc.list_views(from_date="2025-03-09", to_date="2025-03-01")
    assert exc.value.code == "INVALID_DATE_RANGE"

    svc.list_views(status="checked_in", from_date="2025-03-01", to_date="2025-03-09")
    assert check_ins.last_filters == {
        "status": CheckInStatus.CHECKED_IN,
        "from_date": date(2025, 3, 1),
        "to_date": date(2025, 3, 9),
        "service_date": None,
    }


def test_daily_summary_groups_by_service_date_newest_first():
    svc, _ = _service()
    a = svc.check_in(TEACHER, {"member_child_id": "c1", "service_date": "2025-03-02"})
    svc.check_in(TEACHER, {"visitor_child_id": "v1", "service_date": "2025-03-09"})
    svc.check_in(TEACHER, {"member_child_id": "c1", "service_date": "2025-03-09"})
    svc.check_out(TEACHER, {"id": a.id})

    summary = svc.daily_summary(svc.list_views())

    assert summary == [
        {"date": "2025-03-09", "total": 2, "checked_out": 0},
        {"date": "2025-03-02", "total": 1, "checked_out": 1},
    ]


def test_view_to_dict_exposes_child_type():
    svc, _ = _service()
    svc.check_in(TEACHER, {"visitor_child_id": "v1"})
    data = svc.list_views()[0].to_dict()
    assert data["child_type"] == "visitor"
    assert data["status"] == "checked_in"
    assert data["checked_out_at"] is None
