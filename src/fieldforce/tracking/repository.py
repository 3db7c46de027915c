from __future__ import annotations

from datetime import datetime
from typing import Protocol, Sequence

from ..geo.model import Coordinate
from .model import LocationSample


class LocationRepository(Protocol):
    def append(self, *, user_id: int, coordinate: Coordinate, captured_at: datetime) -> int:
        raise NotImplementedError

    def list_since(self, since: datetime) -> Sequence[LocationSample]:
        """Samples captured at or after `since`, most recent first."""

        raise NotImplementedError
