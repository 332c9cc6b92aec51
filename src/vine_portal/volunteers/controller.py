from __future__ import annotations

from flask import Flask, request

from ..auth.guards import roles_required
from ..common.datetime_utils import today_local
from ..common.http import csv_response, json_ok, request_json
from ..container import Container
from ..core.enums import REPORT_ROLES
from .model import CSV_HEADER


def register(app: Flask, container: Container) -> None:
    leaders_only = roles_required(container.auth_service, container.role_service, REPORT_ROLES)
    volunteers = container.volunteer_service

    @app.route("/api/volunteers", methods=["POST"], endpoint="volunteers_register")
    def register_volunteer():
        return json_ok(volunteers.register(request_json()).to_dict(), 201)

    @app.route("/api/volunteers", methods=["GET"], endpoint="volunteers_list")
    @leaders_only
    def list_volunteers():
        return json_ok([v.to_dict() for v in volunteers.list(area=request.args.get("area"))])

    @app.route("/api/volunteers/export.csv", methods=["GET"], endpoint="volunteers_export")
    @leaders_only
    def export_volunteers():
        rows = volunteers.list(area=request.args.get("area"))
        return csv_response(f"volunteers-{today_local().isoformat()}.csv", CSV_HEADER, (v.to_csv_row() for v in rows))
