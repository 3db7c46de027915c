from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.web import current_viewer, json_body, login_required, parse_position
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceState
from ..core.exceptions import ValidationError
from .model import AttendanceRecord


def _record_json(record: AttendanceRecord) -> dict:
    return {
        "id": record.attendance_id,
        "user_id": record.user_id,
        "date": record.work_date.strftime("%Y-%m-%d"),
        "check_in": record.check_in_time.isoformat() if record.check_in_time else None,
        "check_out": record.check_out_time.isoformat() if record.check_out_time else None,
        "status": record.status.value,
        "state": record.state.value,
        "note": record.note,
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="check_in")
    @login_required
    def check_in():
        viewer = current_viewer()
        record = container.attendance_service.check_in(viewer.user_id, parse_position(json_body()))
        return jsonify({"success": True, "message": "Checked in", "record": _record_json(record)}), 201

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="check_out")
    @login_required
    def check_out():
        viewer = current_viewer()
        record = container.attendance_service.check_out(viewer.user_id, parse_position(json_body()))
        return jsonify({"success": True, "message": "Checked out", "record": _record_json(record)})

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def today():
        viewer = current_viewer()
        record = container.attendance_service.get_today_record(viewer.user_id, now_local().date())
        return jsonify(
            {
                "success": True,
                "state": record.state.value if record else AttendanceState.NOT_STARTED.value,
                "record": _record_json(record) if record else None,
            }
        )

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    def history():
        viewer = current_viewer()
        try:
            limit = int(request.args.get("limit", DEFAULT_HISTORY_LIMIT))
        except ValueError:
            raise ValidationError("limit must be an integer") from None
        limit = min(max(limit, 1), 100)
        return jsonify({"success": True, "rows": container.attendance_service.get_history_ui(viewer.user_id, limit=limit)})
