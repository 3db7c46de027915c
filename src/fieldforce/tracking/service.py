from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Dict, Optional

from ..attendance.model import AttendanceRecord
from ..attendance.service import AttendanceService
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_LIVE_WINDOW_MINUTES, DEFAULT_STALE_AFTER_MINUTES
from ..core.exceptions import ConfigurationError, ValidationError
from ..geo.model import Coordinate
from ..users.model import Viewer
from ..users.repository import UserRepository
from .model import LiveLocation, LocationSample
from .repository import LocationRepository
from .visibility import aggregate_live_locations

logger = logging.getLogger(__name__)


class LocationService:
    """Append position samples and build the role-scoped live feed."""

    def __init__(
        self,
        locations: LocationRepository,
        users: UserRepository,
        *,
        live_window: timedelta = timedelta(minutes=DEFAULT_LIVE_WINDOW_MINUTES),
        stale_after: timedelta = timedelta(minutes=DEFAULT_STALE_AFTER_MINUTES),
    ):
        self._locations = locations
        self._users = users
        self._live_window = live_window
        self._stale_after = stale_after

    @property
    def stale_after(self) -> timedelta:
        return self._stale_after

    def record_sample(
        self,
        user_id: int,
        coordinate: Coordinate,
        *,
        captured_at: Optional[datetime] = None,
        now: Optional[datetime] = None,
    ) -> LocationSample:
        if not self._users.get_by_id(user_id):
            raise ValidationError("User does not exist")
        checked = Coordinate.validated(coordinate.latitude, coordinate.longitude)
        now = now or now_local()
        if captured_at is None:
            captured_at = now
        elif captured_at > now:
            # Device clock ahead of the server.
            logger.debug("Clamping future sample time %s for user %s", captured_at, user_id)
            captured_at = now
        sample_id = self._locations.append(user_id=user_id, coordinate=checked, captured_at=captured_at)
        return LocationSample(sample_id=sample_id, user_id=user_id, coordinate=checked, captured_at=captured_at)

    def live_feed(self, viewer: Viewer, *, now: Optional[datetime] = None) -> Dict[int, LiveLocation]:
        now = now or now_local()
        samples = self._locations.list_since(now - self._live_window)
        roster = self._users.list_active()
        return aggregate_live_locations(samples, roster, viewer, now=now, stale_after=self._stale_after)


@dataclass(frozen=True)
class VisitToggle:
    user_id: int
    tracking: bool
    record: Optional[AttendanceRecord]


class FieldVisitService:
    """Field visit on/off: re-classifies today's attendance status from the position.

    A missing position or a missing branch never blocks the toggle itself.
    """

    def __init__(self, attendance: AttendanceService):
        self._attendance = attendance

    def _classify(self, user_id: int, position: Optional[Coordinate], now: Optional[datetime]) -> Optional[AttendanceRecord]:
        if position is None:
            logger.warning("Field visit toggle for user %s without position; status unchanged", user_id)
            return None
        try:
            return self._attendance.reevaluate_status(user_id, position, now=now)
        except ConfigurationError as e:
            logger.warning("Field visit toggle for user %s: %s", user_id, e)
            return None

    def start_visit(self, user_id: int, position: Optional[Coordinate], *, now: Optional[datetime] = None) -> VisitToggle:
        return VisitToggle(user_id=user_id, tracking=True, record=self._classify(user_id, position, now))

    def end_visit(self, user_id: int, position: Optional[Coordinate], *, now: Optional[datetime] = None) -> VisitToggle:
        return VisitToggle(user_id=user_id, tracking=False, record=self._classify(user_id, position, now))
