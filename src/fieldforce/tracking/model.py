from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role
from ..geo.model import Coordinate


@dataclass(frozen=True)
class LocationSample:
    """One persisted position report (append-only)."""

    sample_id: Optional[int]
    user_id: int
    coordinate: Coordinate
    captured_at: datetime


@dataclass(frozen=True)
class LiveLocation:
    """Latest visible position of a user, enriched for rendering."""

    user_id: int
    full_name: str
    role: Role
    branch_id: Optional[int]
    coordinate: Coordinate
    captured_at: datetime
    online: bool

    def as_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "name": self.full_name,
            "role": self.role.value,
            "branch_id": self.branch_id,
            "lat": self.coordinate.latitude,
            "lng": self.coordinate.longitude,
            "captured_at": self.captured_at.isoformat(),
            "online": self.online,
        }
