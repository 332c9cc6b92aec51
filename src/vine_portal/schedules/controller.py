from __future__ import annotations

from flask import Flask

from ..auth.guards import roles_required
from ..common.http import json_ok, request_json
from ..container import Container
from ..core.enums import SCHEDULE_EDITOR_ROLES


def register(app: Flask, container: Container) -> None:
    editor_required = roles_required(container.auth_service, container.role_service, SCHEDULE_EDITOR_ROLES)
    schedule = container.schedule_service

    @app.route("/api/schedule-events", methods=["GET"], endpoint="schedule_events_list")
    def list_events():
        events, source = schedule.list_active()
        return json_ok([e.to_dict() for e in events], source=source.value)

    @app.route("/api/schedule-events/<event_id>", methods=["GET"], endpoint="schedule_events_get")
    def get_event(event_id: str):
        return json_ok(schedule.get(event_id).to_dict())

    @app.route("/api/schedule-events", methods=["POST"], endpoint="schedule_events_create")
    @editor_required
    def create_event():
        return json_ok(schedule.create(request_json()).to_dict(), 201)

    @app.route("/api/schedule-events/<event_id>", methods=["PUT"], endpoint="schedule_events_update")
    @editor_required
    def update_event(event_id: str):
        return json_ok(schedule.update(event_id, request_json()).to_dict())

    @app.route("/api/schedule-events/<event_id>", methods=["DELETE"], endpoint="schedule_events_delete")
    @editor_required
    def delete_event(event_id: str):
        schedule.delete(event_id)
        return json_ok({"deleted": True})
