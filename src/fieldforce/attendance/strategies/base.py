from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...core.enums import AttendanceStatus
from ...geo.model import Coordinate, GeoFence


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


def classify_position(fence: GeoFence, position: Coordinate, tolerance_meters: float) -> AttendanceStatus:
    """Inside the fence (with tolerance) is `present`, outside is `on-field`."""
    if fence.contains(position, tolerance_meters):
        return AttendanceStatus.PRESENT
    return AttendanceStatus.ON_FIELD


class CheckoutStatusStrategy(ABC):
    """Strategy Pattern: how the status is decided when a record is closed."""

    @abstractmethod
    def decide_checkout(
        self,
        *,
        current: AttendanceStatus,
        position: Optional[Coordinate],
        fence: Optional[GeoFence],
        tolerance_meters: float,
    ) -> StatusDecision:
        raise NotImplementedError
