from __future__ import annotations

import csv
import io
import json
import logging
from time import perf_counter
from typing import Any, Iterable, Mapping, Optional, Sequence
from uuid import uuid4

from flask import Flask, Response, g, jsonify, make_response, request
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError, ValidationError

log = logging.getLogger("vine_portal.http")

_REDACTED_KEYS = {"password", "access_token", "refresh_token"}
_HTTP_ERROR_TYPES = {
    400: "validation_error",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    413: "validation_error",
}


def request_id() -> str:
    return g.get("request_id", "-")


def bearer_token() -> Optional[str]:
    """Token from ``Authorization: Bearer <token>``; any other form counts as missing."""

    header = request.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        return None
    token = header[len("Bearer "):].strip()
    return token or None


def json_ok(data: Any, status: int = 200, **extra: Any) -> Response:
    body = {"data": data, "request_id": request_id()}
    body.update(extra)
    return make_response(jsonify(body), status)


def json_error(
    error_type: str,
    message: str,
    status: int,
    *,
    code: Optional[str] = None,
    details: Optional[Mapping[str, Any]] = None,
) -> Response:
    body = {
        "error": {
            "type": error_type,
            "message": message,
            "code": code,
            "details": dict(details or {}),
        },
        "request_id": request_id(),
    }
    return make_response(jsonify(body), status)


def request_json() -> dict:
    """Parsed JSON object body, or a validation error."""

    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object", code="INVALID_BODY")
    return body


def query_int(name: str, default: int, *, minimum: int = 1, maximum: Optional[int] = None) -> int:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer", details={"field": name}) from None
    value = max(minimum, value)
    if maximum is not None:
        value = min(maximum, value)
    return value


def query_flag(name: str) -> bool:
    return request.args.get(name, "").strip().lower() in {"1", "true", "yes"}


def csv_response(filename: str, header: Sequence[str], rows: Iterable[Sequence[Any]]) -> Response:
    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(list(header))
    for row in rows:
        writer.writerow(["" if v is None else v for v in row])
    resp = make_response(buf.getvalue(), 200)
    resp.headers["Content-Type"] = "text/csv; charset=utf-8"
    resp.headers["Content-Disposition"] = f'attachment; filename="{filename}"'
    return resp


def _redact(body: Any) -> Any:
    if isinstance(body, dict):
        return {k: ("***" if k in _REDACTED_KEYS else _redact(v)) for k, v in body.items()}
    if isinstance(body, list):
        return [_redact(v) for v in body]
    return body


def register_request_logging(app: Flask) -> None:
    @app.before_request
    def _log_request_start():
        g.request_started = perf_counter()
        g.request_id = request.headers.get("X-Request-ID") or uuid4().hex[:8]
        log.info("[%s] -> %s %s qs=%s", g.request_id, request.method, request.path, dict(request.args))
        if request.method in ("POST", "PUT", "PATCH") and request.is_json:
            body = request.get_json(silent=True)
            if body:
                log.debug("[%s] body=%s", g.request_id, json.dumps(_redact(body), default=str)[:800])

    @app.after_request
    def _log_response(resp: Response):
        dur_ms = (perf_counter() - g.get("request_started", perf_counter())) * 1000
        log.info("[%s] <- %s %.1fms", request_id(), resp.status_code, dur_ms)
        resp.headers["X-Request-ID"] = request_id()
        return resp


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain_error(e: DomainError):
        if e.status_code >= 500:
            log.error("[%s] %s %s: %s details=%s", request_id(), e.error_type, e.code, e.message, e.details)
        else:
            log.warning("[%s] %s %s: %s", request_id(), e.error_type, e.code, e.message)
        return json_error(e.error_type, e.message, e.status_code, code=e.code, details=e.details)

    @app.errorhandler(Exception)
    def _unhandled(e: Exception):
        if isinstance(e, HTTPException):
            # keep real HTTP codes (404, 405, 413) instead of turning them into 500s
            status = e.code or 500
            log.warning("[%s] http %s: %s", request_id(), status, e.description)
            return json_error(_HTTP_ERROR_TYPES.get(status, "server_error"), e.description or e.name, status, code=e.name.upper().replace(" ", "_"))
        log.exception("[%s] unhandled %s", request_id(), type(e).__name__)
        return json_error("server_error", "Internal server error", 500, code="UNEXPECTED_ERROR")
