"""Timers for self-ingestion and live-view refresh, independent of any UI framework."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Awaitable, Callable, Dict, List, Optional

from ..core.constants import DEFAULT_LIVE_REFRESH_SECONDS
from ..users.model import Viewer
from .model import LiveLocation

if TYPE_CHECKING:
    from .service import LocationService
    from .session import TrackingSession

logger = logging.getLogger(__name__)

LiveUpdate = Callable[[Dict[int, LiveLocation]], None]


class PeriodicTask:
    """Run an async callback every `interval` seconds on the running event loop.

    A failing callback is logged and the timer keeps going.
    """

    def __init__(
        self,
        name: str,
        callback: Callable[[], Awaitable[object]],
        interval: float,
        *,
        immediate: bool = True,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.name = name
        self._callback = callback
        self._interval = float(interval)
        self._immediate = immediate
        self._task: Optional[asyncio.Task] = None
        self.ticks = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)

    def stop(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def wait_stopped(self, task: Optional[asyncio.Task] = None) -> None:
        task = task or self._task
        if task is None:
            return
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def tick(self) -> None:
        self.ticks += 1
        try:
            await self._callback()
        except Exception:
            logger.exception("Periodic task %s failed", self.name)

    async def _run(self) -> None:
        if self._immediate:
            await self.tick()
        while True:
            await asyncio.sleep(self._interval)
            await self.tick()


class RefreshScheduler:
    """Timer context of one screen: tracking (self-ingestion) and live-view refresh.

    Create it when the screen/session starts and call `dispose()` on logout or
    navigation; nothing keeps firing afterwards.
    """

    def __init__(self, locations: "LocationService", *, refresh_interval: float = DEFAULT_LIVE_REFRESH_SECONDS):
        self._locations = locations
        self._refresh_interval = float(refresh_interval)
        self._tracking: Optional["TrackingSession"] = None
        self._live: Optional[PeriodicTask] = None
        self._disposed = False

    def _ensure_open(self) -> None:
        if self._disposed:
            raise RuntimeError("RefreshScheduler is disposed")

    @property
    def refresh_interval(self) -> float:
        return self._refresh_interval

    @property
    def tracking(self) -> Optional["TrackingSession"]:
        return self._tracking

    @property
    def active_timers(self) -> List[str]:
        names: List[str] = []
        if self._tracking is not None and self._tracking.active:
            names.append(self._tracking.timer_name)
        if self._live is not None and self._live.running:
            names.append(self._live.name)
        return names

    def start_tracking(self, session: "TrackingSession") -> None:
        self._ensure_open()
        self.stop_tracking()
        self._tracking = session
        session.start()

    def stop_tracking(self) -> None:
        if self._tracking is not None:
            self._tracking.stop()
            self._tracking = None

    def start_live_view(self, viewer: Viewer, on_update: LiveUpdate, *, interval: Optional[float] = None) -> None:
        self._ensure_open()
        self.stop_live_view()

        async def refresh() -> None:
            feed = await asyncio.to_thread(self._locations.live_feed, viewer)
            on_update(feed)

        self._live = PeriodicTask(
            f"live-view:{viewer.user_id}", refresh, interval or self._refresh_interval, immediate=True
        )
        self._live.start()

    def stop_live_view(self) -> None:
        if self._live is not None:
            self._live.stop()
            self._live = None

    def dispose(self) -> None:
        self.stop_tracking()
        self.stop_live_view()
        self._disposed = True

    async def __aenter__(self) -> "RefreshScheduler":
        return self

    async def __aexit__(self, *exc) -> None:
        self.dispose()
