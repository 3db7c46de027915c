from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import now_local
from ..common.web import current_viewer, login_required, month_arg
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports/attendance", methods=["GET"], endpoint="attendance_report")
    @login_required
    def attendance_report():
        data = container.report_service.monthly_rows(current_viewer(), month_arg(now_local()))
        return jsonify({"success": True, "month": data.month, "rows": data.rows, "summary": data.summary})
