from __future__ import annotations

import asyncio
import itertools
import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_POSITION_TIMEOUT_SECONDS
from ..core.enums import PositionErrorKind
from ..core.exceptions import LocationUnavailable
from ..geo.model import Coordinate

logger = logging.getLogger(__name__)

PositionCallback = Callable[[Coordinate], None]
PositionErrorCallback = Callable[["PositionError"], None]


class PositionError(LocationUnavailable):
    """Position request failed: permission denied, unavailable or timeout."""

    def __init__(self, kind: PositionErrorKind, message: str = ""):
        super().__init__(message or f"Position request failed: {kind.value}", reason=kind.value)
        self.kind = kind


class PositionProvider(Protocol):
    async def get_current_position(
        self,
        *,
        high_accuracy: bool = True,
        timeout: float = DEFAULT_POSITION_TIMEOUT_SECONDS,
    ) -> Coordinate:
        raise NotImplementedError

    def watch_position(
        self,
        callback: PositionCallback,
        error_callback: Optional[PositionErrorCallback] = None,
        *,
        high_accuracy: bool = True,
    ) -> int:
        raise NotImplementedError

    def clear_watch(self, handle: int) -> None:
        raise NotImplementedError


class DeviceFeedPositionProvider(PositionProvider):
    """Position provider fed by fixes the device pushes in.

    `get_current_position` answers with the last fix when it is fresh enough,
    otherwise waits for the next one until the timeout expires. Must be used
    from the event loop thread; hop in with `loop.call_soon_threadsafe` from
    other threads.
    """

    def __init__(self, *, max_age: timedelta = timedelta(seconds=30), clock: Callable[[], datetime] = now_local):
        self._max_age = max_age
        self._clock = clock
        self._latest: Optional[Tuple[Coordinate, datetime]] = None
        self._denied = False
        self._waiters: List[asyncio.Future] = []
        self._watchers: Dict[int, Tuple[PositionCallback, Optional[PositionErrorCallback]]] = {}
        self._handles = itertools.count(1)

    @property
    def latest(self) -> Optional[Coordinate]:
        return self._latest[0] if self._latest else None

    def push_fix(self, coordinate: Coordinate, captured_at: Optional[datetime] = None) -> None:
        self._denied = False
        self._latest = (coordinate, captured_at or self._clock())

        waiters, self._waiters = self._waiters, []
        for fut in waiters:
            if not fut.done():
                fut.set_result(coordinate)

        for callback, _ in list(self._watchers.values()):
            callback(coordinate)

    def push_error(self, kind: PositionErrorKind, message: str = "") -> None:
        error = PositionError(kind, message)
        if kind == PositionErrorKind.PERMISSION_DENIED:
            self._denied = True
            self._latest = None

        waiters, self._waiters = self._waiters, []
        for fut in waiters:
            if not fut.done():
                fut.set_exception(error)

        for _, error_callback in list(self._watchers.values()):
            if error_callback:
                error_callback(error)

    def _fresh_fix(self) -> Optional[Coordinate]:
        if not self._latest:
            return None
        coordinate, captured_at = self._latest
        if self._clock() - captured_at > self._max_age:
            return None
        return coordinate

    async def get_current_position(
        self,
        *,
        high_accuracy: bool = True,
        timeout: float = DEFAULT_POSITION_TIMEOUT_SECONDS,
    ) -> Coordinate:
        # Accuracy mode is chosen on the device; fixes arrive already resolved.
        if self._denied:
            raise PositionError(PositionErrorKind.PERMISSION_DENIED, "Location permission denied")

        fix = self._fresh_fix()
        if fix is not None:
            return fix

        fut = asyncio.get_running_loop().create_future()
        self._waiters.append(fut)
        try:
            return await asyncio.wait_for(fut, timeout=timeout)
        except asyncio.TimeoutError:
            raise PositionError(PositionErrorKind.TIMEOUT, f"No position fix within {timeout:g}s") from None
        finally:
            if fut in self._waiters:
                self._waiters.remove(fut)

    def watch_position(
        self,
        callback: PositionCallback,
        error_callback: Optional[PositionErrorCallback] = None,
        *,
        high_accuracy: bool = True,
    ) -> int:
        handle = next(self._handles)
        self._watchers[handle] = (callback, error_callback)
        return handle

    def clear_watch(self, handle: int) -> None:
        if self._watchers.pop(handle, None) is None:
            logger.debug("clear_watch: unknown handle %s", handle)
