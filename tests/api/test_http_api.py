from __future__ import annotations

from vine_portal.core.enums import EventType
from vine_portal.schedules.model import ScheduleEvent


def test_health_reports_backend_state_and_request_id(client):
    resp = client.get("/health", headers={"X-Request-ID": "abc123"})

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["data"] == {"status": "ok", "backend_configured": False}
    assert body["request_id"] == "abc123"
    assert resp.headers["X-Request-ID"] == "abc123"


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/api/nope")
    body = resp.get_json()
    assert resp.status_code == 404
    assert body["error"]["type"] == "not_found"
    assert body["request_id"]


def test_check_in_then_check_out(client, auth):
    resp = client.post("/api/check-ins", json={"member_child_id": "c1", "checkin_notes": "tummy ache"}, headers=auth("tok-teacher"))
    assert resp.status_code == 201
    created = resp.get_json()["data"]
    assert created["status"] == "checked_in"
    assert created["checked_in_by_name"] == "Marta"
    assert created["service_date"] == "2025-03-09"
    assert created["checkin_notes"] == "tummy ache"

    resp = client.put("/api/check-ins", json={"id": created["id"]}, headers=auth("tok-teacher"))
    assert resp.status_code == 200
    done = resp.get_json()["data"]
    assert done["status"] == "checked_out"
    assert done["checked_out_by"] == "u-teacher"
    assert done["checked_out_at"] == "2025-03-09T13:15:00+00:00"

    resp = client.put("/api/check-ins", json={"id": created["id"]}, headers=auth("tok-teacher"))
    assert resp.status_code == 409
    assert resp.get_json()["error"]["code"] == "ALREADY_CHECKED_OUT"


def test_check_in_with_both_children_is_rejected(client, auth, fakes):
    resp = client.post(
        "/api/check-ins",
        json={"member_child_id": "c1", "visitor_child_id": "v1"},
        headers=auth("tok-teacher"),
    )
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "INVALID_CHILD_REFERENCE"
    assert fakes["check_ins"].rows == {}


def test_check_in_requires_staff_role(client, auth, fakes):
    no_token = client.post("/api/check-ins", json={"member_child_id": "c1"})
    assert no_token.status_code == 401
    assert no_token.get_json()["error"]["code"] == "NO_TOKEN"

    bad_token = client.post("/api/check-ins", json={"member_child_id": "c1"}, headers=auth("expired"))
    assert bad_token.status_code == 401
    assert bad_token.get_json()["error"]["code"] == "INVALID_TOKEN"

    member = client.post("/api/check-ins", json={"member_child_id": "c1"}, headers=auth("tok-member"))
    assert member.status_code == 403
    assert member.get_json()["error"]["type"] == "forbidden"
    assert fakes["check_ins"].rows == {}


def test_check_in_list_with_summary(client, auth):
    client.post("/api/check-ins", json={"member_child_id": "c1"}, headers=auth("tok-teacher"))

    resp = client.get("/api/check-ins?summary=true", headers=auth("tok-teacher"))

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["data"][0]["child_type"] == "member"
    assert body["data"][0]["child_name"] == "Davi"
    assert body["summary"] == [{"date": "2025-03-09", "total": 1, "checked_out": 0}]


def test_member_profile_without_gender_is_not_created(client, auth, fakes):
    resp = client.post(
        "/api/member-profile",
        json={"name": "Pedro", "phone": "519-123-4567", "email": "pedro@vine.church"},
        headers=auth("tok-member"),
    )

    body = resp.get_json()
    assert resp.status_code == 400
    assert body["error"]["type"] == "validation_error"
    assert body["error"]["details"]["missing_fields"] == ["gender"]
    assert fakes["profiles"].rows == {}


def test_member_profile_create_and_read_with_permissions(client, auth):
    resp = client.post(
        "/api/member-profile",
        json={"name": "Pedro", "phone": "519-123-4567", "email": "pedro@vine.church", "gender": "male"},
        headers=auth("tok-member"),
    )
    assert resp.status_code == 201

    body = client.get("/api/member-profile", headers=auth("tok-member")).get_json()
    assert body["data"]["name"] == "Pedro"
    assert body["role"] == "member"
    assert body["permissions"]["can_access_profile"] is True
    assert body["permissions"]["can_access_admin"] is False


def test_available_spouses_warns_without_profile(client, auth):
    body = client.get("/api/available-spouses", headers=auth("tok-member")).get_json()
    assert body["data"] == []
    assert body["warning"] == "missing_gender"


def test_schedule_update_without_auth_does_not_write(client, fakes):
    fakes["events"].rows["e1"] = ScheduleEvent(
        id="e1",
        title_pt="Culto",
        title_en="Service",
        event_type=EventType.WEEKLY_RECURRING,
        icon_name="church",
        day_of_week=0,
        time="10:00",
    )

    resp = client.put("/api/schedule-events/e1", json={"time": "11:00"})

    assert resp.status_code == 401
    assert fakes["events"].writes == 0
    assert fakes["events"].rows["e1"].time == "10:00"


def test_schedule_update_as_teacher_is_forbidden(client, auth, fakes):
    resp = client.post(
        "/api/schedule-events",
        json={"title_pt": "a", "title_en": "a", "event_type": "special", "icon_name": "star"},
        headers=auth("tok-teacher"),
    )
    assert resp.status_code == 403
    assert fakes["events"].writes == 0


def test_public_reads_fall_back_to_static_content(client):
    sermons = client.get("/api/sermons?per_page=2").get_json()
    assert sermons["source"] == "static"
    assert len(sermons["data"]) == 2
    assert sermons["pagination"]["per_page"] == 2

    schedule = client.get("/api/schedule-events").get_json()
    assert schedule["source"] == "static"
    assert schedule["data"][0]["event_type"] == "weekly_recurring"


def test_write_without_backend_is_service_unavailable(client):
    resp = client.post(
        "/api/volunteers",
        json={"name": "Rafa", "phone": "5191234567", "description": "x", "areas": ["kids"]},
    )
    assert resp.status_code == 503
    assert resp.get_json()["error"]["code"] == "BACKEND_NOT_CONFIGURED"


def test_visitor_registration_and_csv_export(client, auth):
    resp = client.post(
        "/api/visitors",
        json={"visit_date": "2025-03-09", "name": "Carla", "phone": "5191234567", "how_found": "google"},
    )
    assert resp.status_code == 201
    assert resp.get_json()["data"]["children"] == []

    assert client.get("/api/visitors/export.csv", headers=auth("tok-teacher")).status_code == 403

    export = client.get("/api/visitors/export.csv", headers=auth("tok-leader"))
    assert export.status_code == 200
    assert export.headers["Content-Type"].startswith("text/csv")
    lines = export.get_data(as_text=True).splitlines()
    assert lines[0] == "visit_date,name,phone,how_found,how_found_details,created_at"
    assert lines[1].startswith("2025-03-09,Carla,5191234567,google")


def test_login_and_session(client, auth):
    bad = client.post("/api/auth/login", json={"email": "marta@vine.church", "password": "nope"})
    assert bad.status_code == 401
    assert bad.get_json()["error"]["code"] == "INVALID_CREDENTIALS"

    ok = client.post("/api/auth/login", json={"email": " Marta@Vine.church ", "password": "secret"})
    assert ok.status_code == 200
    assert ok.get_json()["data"]["user"]["id"] == "u-teacher"

    session = client.get("/api/auth/session", headers=auth("tok-leader")).get_json()["data"]
    assert session["role"] == "leader"
    assert session["permissions"]["can_manage_visitors"] is True


def test_non_object_body_is_rejected(client, auth):
    resp = client.post("/api/check-ins", json=["c1"], headers=auth("tok-teacher"))
    assert resp.status_code == 400
    assert resp.get_json()["error"]["code"] == "INVALID_BODY"
