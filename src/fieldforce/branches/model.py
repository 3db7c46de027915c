from __future__ import annotations

from dataclasses import dataclass

from ..geo.model import Coordinate, GeoFence


@dataclass(frozen=True)
class Branch:
    """Domain entity: an office branch and its geofence."""

    branch_id: int
    name: str
    latitude: float
    longitude: float
    radius_meters: float

    @property
    def geofence(self) -> GeoFence:
        return GeoFence(center=Coordinate(self.latitude, self.longitude), radius_meters=float(self.radius_meters))
