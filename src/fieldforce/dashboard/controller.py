from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import admin_required, current_viewer, login_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/dashboard", methods=["GET"], endpoint="dashboard")
    @admin_required
    def dashboard():
        summary = container.dashboard_service.summary(current_viewer())
        return jsonify({"success": True, **summary.as_dict()})

    @app.route("/api/dashboard/insight", methods=["GET"], endpoint="dashboard_insight")
    @admin_required
    def dashboard_insight():
        insight = container.dashboard_service.insight(current_viewer())
        return jsonify({"success": True, **insight.as_dict()})

    @app.route("/api/advice", methods=["GET"], endpoint="field_advice")
    @login_required
    def field_advice():
        viewer = current_viewer()
        advice = container.ai_service.field_advice(
            session.get("name") or str(viewer.user_id),
            viewer.role.value,
            request.args.get("context"),
        )
        return jsonify({"success": True, "advice": advice})
