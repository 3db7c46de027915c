from __future__ import annotations

from typing import Optional

from ...core.enums import AttendanceStatus
from ...geo.model import Coordinate, GeoFence
from .base import CheckoutStatusStrategy, StatusDecision


class KeepStatusStrategy(CheckoutStatusStrategy):
    """Status set during the day persists regardless of the exit position."""

    def decide_checkout(
        self,
        *,
        current: AttendanceStatus,
        position: Optional[Coordinate],
        fence: Optional[GeoFence],
        tolerance_meters: float,
    ) -> StatusDecision:
        return StatusDecision(status=current)
