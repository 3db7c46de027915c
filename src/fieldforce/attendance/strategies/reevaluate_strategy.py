from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceStatus
from ...geo.model import Coordinate, GeoFence
from .base import CheckoutStatusStrategy, StatusDecision, classify_position


class GeofenceReevaluateStrategy(CheckoutStatusStrategy):
    """Re-test the exit position: outside the fence becomes on-field, inside becomes present."""

    def decide_checkout(
        self,
        *,
        current: AttendanceStatus,
        position: Optional[Coordinate],
        fence: Optional[GeoFence],
        tolerance_meters: float,
    ) -> StatusDecision:
        if position is None:
            return StatusDecision(status=current, note="checkout without position")
        if fence is None:
            return StatusDecision(status=current, note="checkout without geofence")
        return StatusDecision(status=classify_position(fence, position, tolerance_meters))
