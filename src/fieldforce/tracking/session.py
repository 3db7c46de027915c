from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..core.constants import DEFAULT_POSITION_TIMEOUT_SECONDS, DEFAULT_TRACKING_INTERVAL_SECONDS
from ..core.exceptions import LocationUnavailable, PersistenceError, ValidationError
from .model import LocationSample
from .position import PositionProvider
from .scheduler import PeriodicTask
from .service import LocationService

logger = logging.getLogger(__name__)


class TrackingSession:
    """One user's active broadcast of their position.

    `start()` samples immediately, then every `interval` seconds. `stop()`
    cancels the timer; a position request still in flight when the session
    stops is discarded when it resolves.
    """

    def __init__(
        self,
        user_id: int,
        provider: PositionProvider,
        locations: LocationService,
        *,
        interval: float = DEFAULT_TRACKING_INTERVAL_SECONDS,
        timeout: float = DEFAULT_POSITION_TIMEOUT_SECONDS,
    ):
        self.user_id = user_id
        self._provider = provider
        self._locations = locations
        self._timeout = float(timeout)
        self._active = False
        self._generation = 0
        self._timer = PeriodicTask(f"tracking:{user_id}", self.sample_once, interval, immediate=True)
        self.samples_written = 0
        self.failures = 0

    @property
    def active(self) -> bool:
        return self._active

    @property
    def timer_name(self) -> str:
        return self._timer.name

    @property
    def interval(self) -> float:
        return self._timer.interval

    @property
    def timeout(self) -> float:
        return self._timeout

    def start(self) -> None:
        if self._active:
            return
        self._active = True
        self._generation += 1
        self._timer.start()
        logger.info("Tracking started for user %s", self.user_id)

    def stop(self) -> None:
        if not self._active:
            return
        self._active = False
        self._generation += 1
        self._timer.stop()
        logger.info("Tracking stopped for user %s", self.user_id)

    async def sample_once(self) -> Optional[LocationSample]:
        if not self._active:
            return None
        generation = self._generation

        try:
            coordinate = await self._provider.get_current_position(high_accuracy=True, timeout=self._timeout)
        except LocationUnavailable as e:
            self.failures += 1
            logger.warning("Tracking sample for user %s failed: %s", self.user_id, e)
            return None

        if not self._active or generation != self._generation:
            logger.debug("Discarding position for user %s resolved after stop", self.user_id)
            return None

        try:
            sample = await asyncio.to_thread(self._locations.record_sample, self.user_id, coordinate)
        except (PersistenceError, ValidationError) as e:
            self.failures += 1
            logger.warning("Storing tracking sample for user %s failed: %s", self.user_id, e)
            return None

        self.samples_written += 1
        return sample
