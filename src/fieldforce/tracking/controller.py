from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import current_viewer, json_body, login_required, parse_position, parse_timestamp
from ..container import Container
from ..core.exceptions import ValidationError
from .markers import build_markers


def register(app: Flask, container: Container) -> None:
    settings = container.settings

    def _toggle_json(toggle) -> dict:
        record = toggle.record
        return {
            "success": True,
            "tracking": toggle.tracking,
            "status": record.status.value if record else None,
            "interval_seconds": settings.tracking_interval_seconds,
        }

    @app.route("/api/tracking/start", methods=["POST"], endpoint="tracking_start")
    @login_required
    def tracking_start():
        viewer = current_viewer()
        toggle = container.field_visit_service.start_visit(viewer.user_id, parse_position(json_body()))
        return jsonify(_toggle_json(toggle))

    @app.route("/api/tracking/stop", methods=["POST"], endpoint="tracking_stop")
    @login_required
    def tracking_stop():
        viewer = current_viewer()
        toggle = container.field_visit_service.end_visit(viewer.user_id, parse_position(json_body()))
        return jsonify(_toggle_json(toggle))

    @app.route("/api/locations", methods=["POST"], endpoint="locations_append")
    @login_required
    def append_location():
        viewer = current_viewer()
        data = json_body()
        coordinate = parse_position(data)
        if coordinate is None:
            raise ValidationError("latitude and longitude are required")

        sample = container.location_service.record_sample(
            viewer.user_id,
            coordinate,
            captured_at=parse_timestamp(data.get("captured_at")),
        )
        return (
            jsonify(
                {
                    "success": True,
                    "id": sample.sample_id,
                    "captured_at": sample.captured_at.isoformat(),
                }
            ),
            201,
        )

    @app.route("/api/live", methods=["GET"], endpoint="live_feed")
    @login_required
    def live_feed():
        live = container.location_service.live_feed(current_viewer())
        return jsonify(
            {
                "success": True,
                "locations": [live[uid].as_dict() for uid in sorted(live)],
                "markers": [m.as_dict() for m in build_markers(live)],
                "refresh_seconds": settings.live_refresh_seconds,
            }
        )
