from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..common.validators import require_float
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class Coordinate:
    """A WGS84 latitude/longitude pair in degrees."""

    latitude: float
    longitude: float

    @classmethod
    def validated(cls, latitude: Any, longitude: Any) -> "Coordinate":
        lat = require_float(latitude, "latitude")
        lng = require_float(longitude, "longitude")
        if not -90.0 <= lat <= 90.0:
            raise ValidationError("Latitude must be between -90 and 90")
        if not -180.0 <= lng <= 180.0:
            raise ValidationError("Longitude must be between -180 and 180")
        return cls(latitude=lat, longitude=lng)

    def as_dict(self) -> dict:
        return {"lat": self.latitude, "lng": self.longitude}


@dataclass(frozen=True)
class GeoFence:
    """Circular boundary owned by a branch."""

    center: Coordinate
    radius_meters: float

    def distance_to(self, point: Coordinate) -> float:
        from .distance import distance_meters

        return distance_meters(point, self.center)

    def contains(self, point: Coordinate, tolerance_meters: float = 0.0) -> bool:
        return self.distance_to(point) <= self.radius_meters + max(float(tolerance_meters), 0.0)

    def overage_meters(self, point: Coordinate) -> float:
        """Signed distance beyond the nominal radius (negative when inside)."""
        return self.distance_to(point) - self.radius_meters
