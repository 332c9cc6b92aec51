from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from typing import Optional

import pytest

from vine_portal.auth.model import AuthSession, AuthUser
from vine_portal.auth.service import AuthService
from vine_portal.checkins.model import CheckIn, CheckInView
from vine_portal.checkins.service import CheckInService
from vine_portal.children.model import MemberChild, VisitorChild
from vine_portal.children.service import ChildService, VisitorChildService
from vine_portal.container import Container
from vine_portal.core.enums import CheckInStatus, Role
from vine_portal.core.exceptions import BackendNotConfiguredError
from vine_portal.gallery.service import GalleryService
from vine_portal.main import create_app
from vine_portal.profiles.model import MemberProfile
from vine_portal.profiles.service import ProfileService
from vine_portal.schedules.model import ScheduleEvent
from vine_portal.schedules.service import ScheduleService
from vine_portal.sermons.service import SermonService
from vine_portal.users.service import RoleService
from vine_portal.visitors.model import Visitor
from vine_portal.visitors.service import VisitorService
from vine_portal.volunteers.service import VolunteerService

NOW = datetime(2025, 3, 9, 13, 15, tzinfo=timezone.utc)

USERS = {
    "tok-teacher": AuthUser(user_id="u-teacher", email="marta@vine.church", metadata_name="Marta"),
    "tok-member": AuthUser(user_id="u-member", email="pedro@vine.church"),
    "tok-leader": AuthUser(user_id="u-leader", email="lider@vine.church"),
    "tok-admin": AuthUser(user_id="u-admin", email="admin@vine.church"),
}
ROLES = {
    "u-teacher": Role.TEACHER,
    "u-member": Role.MEMBER,
    "u-leader": Role.LEADER,
    "u-admin": Role.ADMIN,
}


class FakeConn:
    is_configured = False
    url = ""


class FakeAuthGateway:
    def get_user(self, token):
        return USERS.get(token)

    def sign_in(self, email, password):
        user = next((u for u in USERS.values() if u.email == email), None)
        if user is None or password != "secret":
            return None
        return AuthSession(access_token="tok", refresh_token="ref", expires_at=1, user=user)

    def sign_out(self, token):
        pass


class FakeRoles:
    def get_role(self, user_id) -> Optional[Role]:
        return ROLES.get(user_id)


class FakeProfiles:
    def __init__(self):
        self.rows: dict[str, MemberProfile] = {}

    def get_by_user_id(self, user_id):
        return next((p for p in self.rows.values() if p.user_id == user_id), None)

    def get_by_id(self, profile_id):
        return self.rows.get(profile_id)

    def list_all(self):
        return list(self.rows.values())

    def list_available_spouses(self, *, exclude_id, gender):
        return [p for p in self.rows.values() if p.id != exclude_id and p.gender == gender and not p.spouse_id]

    def create(self, values):
        values = {**values, "volunteer_areas": tuple(values.get("volunteer_areas") or ())}
        profile = MemberProfile(id=f"p{len(self.rows) + 1}", created_at=NOW, updated_at=NOW, **values)
        self.rows[profile.id] = profile
        return profile

    def update(self, profile_id, values, *, expected_updated_at=None):
        current = self.rows.get(profile_id)
        if current is None or (expected_updated_at is not None and current.updated_at != expected_updated_at):
            return None
        self.rows[profile_id] = replace(current, **values)
        return self.rows[profile_id]

    def link_spouses(self, profile_a, profile_b):
        raise AssertionError("not used")

    def unlink_spouses(self, profile_id):
        raise AssertionError("not used")


class FakeChildren:
    def __init__(self, rows=()):
        self.rows = {c.id: c for c in rows}

    def list_for_parent(self, parent_id):
        return [c for c in self.rows.values() if parent_id in (c.parent1_id, c.parent2_id)]

    def get_by_id(self, child_id):
        return self.rows.get(child_id)

    def search(self, term=None):
        return list(self.rows.values())


class FakeCheckIns:
    def __init__(self):
        self.rows: dict[str, CheckIn] = {}

    def create(self, values):
        rec = CheckIn(id=f"ci-{len(self.rows) + 1}", **values)
        self.rows[rec.id] = rec
        return rec

    def get_by_id(self, check_in_id):
        return self.rows.get(check_in_id)

    def mark_checked_out(self, check_in_id, *, checked_out_by, checked_out_by_name, checked_out_at, checkout_notes=None):
        rec = self.rows.get(check_in_id)
        if rec is None or rec.status != CheckInStatus.CHECKED_IN:
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
        return [
            CheckInView(check_in=r, child_name="Davi", parent_name="Ana", parent_phone="5191234567")
            for r in self.rows.values()
            if status is None or r.status == status
        ]


class UnconfiguredRepo:
    """Every call fails like a backend without credentials."""

    def __getattr__(self, name):
        def _fail(*args, **kwargs):
            raise BackendNotConfiguredError("Backend is not configured")

        return _fail


class FakeEvents:
    def __init__(self):
        self.rows: dict[str, ScheduleEvent] = {}
        self.writes = 0

    def list_active(self):
        return list(self.rows.values())

    def get_by_id(self, event_id):
        return self.rows.get(event_id)

    def create(self, values):
        self.writes += 1
        event = ScheduleEvent(id=f"e{len(self.rows) + 1}", **values)
        self.rows[event.id] = event
        return event

    def update(self, event_id, values):
        self.writes += 1
        self.rows[event_id] = replace(self.rows[event_id], **values)
        return self.rows[event_id]

    def delete(self, event_id):
        self.writes += 1
        return self.rows.pop(event_id, None) is not None


class FakeVisitors:
    def __init__(self):
        self.rows: list[Visitor] = []

    def register(self, values, children):
        visitor = Visitor(id=f"vis{len(self.rows) + 1}", **values)
        self.rows.append(visitor)
        return visitor, [VisitorChild(id=f"vc-{visitor.id}-{i}", **c) for i, c in enumerate(children)]

    def list(self, *, from_date=None, to_date=None):
        return list(self.rows)


class FakeVisitorChildren(FakeChildren):
    def create(self, values):
        child = VisitorChild(id=f"vc{len(self.rows) + 1}", **values)
        self.rows[child.id] = child
        return child


@pytest.fixture
def fakes():
    profiles = FakeProfiles()
    children = FakeChildren([MemberChild(id="c1", name="Davi", date_of_birth=datetime(2019, 4, 2).date(), parent1_id="p-ana")])
    visitor_children = FakeVisitorChildren()
    return {
        "profiles": profiles,
        "children": children,
        "visitor_children": visitor_children,
        "check_ins": FakeCheckIns(),
        "events": FakeEvents(),
        "visitors": FakeVisitors(),
    }


@pytest.fixture
def app(monkeypatch, fakes):
    monkeypatch.setenv("APP_ENV", "testing")
    roles = RoleService(FakeRoles())
    container = Container(
        conn=FakeConn(),
        page_size=12,
        auth_service=AuthService(FakeAuthGateway(), roles),
        role_service=roles,
        profile_service=ProfileService(fakes["profiles"]),
        child_service=ChildService(fakes["children"], fakes["profiles"], roles),
        visitor_child_service=VisitorChildService(fakes["visitor_children"]),
        check_in_service=CheckInService(
            fakes["check_ins"], fakes["children"], fakes["visitor_children"], fakes["profiles"], clock=lambda: NOW
        ),
        sermon_service=SermonService(UnconfiguredRepo()),
        schedule_service=ScheduleService(fakes["events"]),
        gallery_service=GalleryService(UnconfiguredRepo(), UnconfiguredRepo()),
        visitor_service=VisitorService(fakes["visitors"]),
        volunteer_service=VolunteerService(UnconfiguredRepo()),
    )
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth():
    def _headers(token: str) -> dict:
        return {"Authorization": f"Bearer {token}"}

    return _headers
