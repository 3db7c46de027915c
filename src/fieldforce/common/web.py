"""Flask helpers shared by the controllers: session guard, JSON errors, input parsing."""

from __future__ import annotations

import logging
from datetime import datetime
from functools import wraps
from typing import Optional

from flask import Flask, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.enums import Role
from ..core.exceptions import (
    AlreadyCheckedOut,
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    DomainError,
    DuplicateCheckIn,
    GeofenceViolation,
    LocationUnavailable,
    NotCheckedIn,
    PersistenceError,
    ValidationError,
)
from ..geo.model import Coordinate
from ..users.model import Viewer

logger = logging.getLogger(__name__)

# Most specific first.
_STATUS_BY_ERROR = (
    (GeofenceViolation, 422, "geofence_violation"),
    (DuplicateCheckIn, 409, "duplicate_check_in"),
    (NotCheckedIn, 409, "not_checked_in"),
    (AlreadyCheckedOut, 409, "already_checked_out"),
    (LocationUnavailable, 428, "location_unavailable"),
    (ConfigurationError, 409, "configuration"),
    (PersistenceError, 503, "persistence"),
    (AuthenticationError, 401, "authentication"),
    (AuthorizationError, 403, "authorization"),
    (ValidationError, 400, "validation"),
)


def error_payload(exc: DomainError) -> tuple[dict, int]:
    status, kind = 400, "domain"
    for error_type, code, name in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            status, kind = code, name
            break

    body = {"success": False, "error": kind, "message": str(exc)}
    if isinstance(exc, GeofenceViolation):
        body["distance_meters"] = round(exc.distance_meters, 1)
        body["overage_meters"] = round(exc.overage_meters, 1)
    if isinstance(exc, LocationUnavailable) and exc.reason:
        body["reason"] = exc.reason
    return body, status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def handle_domain_error(e: DomainError):
        body, status = error_payload(e)
        if status >= 500:
            logger.warning("%s %s failed: %s", request.method, request.path, e)
        return jsonify(body), status

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        if isinstance(e, HTTPException):
            return jsonify({"success": False, "error": "http", "message": e.description}), e.code
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"success": False, "error": "internal", "message": "Internal server error"}), 500


def current_viewer() -> Viewer:
    if "user_id" not in session:
        raise AuthenticationError("Please log in to continue")
    return Viewer(
        user_id=int(session["user_id"]),
        role=Role(session["role"]),
        branch_id=session.get("branch_id"),
    )


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        current_viewer()
        return view(*args, **kwargs)

    return wrapper


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not current_viewer().role.is_admin:
            raise AuthorizationError("Only administrators can open this page")
        return view(*args, **kwargs)

    return wrapper


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def parse_position(data: dict) -> Optional[Coordinate]:
    """Read `latitude`/`longitude` (or `lat`/`lng`); None when both are absent."""

    lat = data.get("latitude", data.get("lat"))
    lng = data.get("longitude", data.get("lng"))
    if lat in (None, "") and lng in (None, ""):
        return None
    return Coordinate.validated(lat, lng)


def parse_timestamp(value) -> Optional[datetime]:
    if value in (None, ""):
        return None
    try:
        parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError("Invalid captured_at timestamp") from None
    # Stored as naive local time.
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def month_arg(default: datetime) -> str:
    return request.args.get("month") or default.strftime("%Y-%m")
