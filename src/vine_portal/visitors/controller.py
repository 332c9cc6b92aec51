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
    visitors = container.visitor_service

    @app.route("/api/visitors", methods=["POST"], endpoint="visitors_register")
    def register_visitor():
        visitor, children = visitors.register(request_json())
        data = visitor.to_dict()
        data["children"] = [c.to_dict() for c in children]
        return json_ok(data, 201)

    @app.route("/api/visitors", methods=["GET"], endpoint="visitors_list")
    @leaders_only
    def list_visitors():
        rows = visitors.list(from_date=request.args.get("from_date"), to_date=request.args.get("to_date"))
        return json_ok([v.to_dict() for v in rows])

    @app.route("/api/visitors/export.csv", methods=["GET"], endpoint="visitors_export")
    @leaders_only
    def export_visitors():
        rows = visitors.list(from_date=request.args.get("from_date"), to_date=request.args.get("to_date"))
        return csv_response(f"visitors-{today_local().isoformat()}.csv", CSV_HEADER, (v.to_csv_row() for v in rows))
