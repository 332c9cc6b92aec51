from __future__ import annotations

from flask import Flask, g, request

from ..auth.guards import roles_required
from ..common.http import json_ok, query_flag, request_json
from ..container import Container
from ..core.enums import STAFF_ROLES


def register(app: Flask, container: Container) -> None:
    # rows carry children's medical notes, so listing is staff-only as well
    staff_required = roles_required(container.auth_service, container.role_service, STAFF_ROLES)
    check_ins = container.check_in_service

    @app.route("/api/check-ins", methods=["GET"], endpoint="check_ins_list")
    @staff_required
    def list_check_ins():
        views = check_ins.list_views(
            status=request.args.get("status"),
            from_date=request.args.get("from_date"),
            to_date=request.args.get("to_date"),
            service_date=request.args.get("service_date"),
        )
        data = [v.to_dict() for v in views]
        if query_flag("summary"):
            return json_ok(data, summary=check_ins.daily_summary(views))
        return json_ok(data)

    @app.route("/api/check-ins", methods=["POST"], endpoint="check_ins_create")
    @staff_required
    def create_check_in():
        record = check_ins.check_in(g.auth_user, request_json())
        return json_ok(record.to_dict(), 201)

    @app.route("/api/check-ins", methods=["PUT"], endpoint="check_ins_checkout")
    @staff_required
    def check_out():
        record = check_ins.check_out(g.auth_user, request_json())
        return json_ok(record.to_dict())
