"""Map markers for the live feed, kept in sync with a renderer incrementally."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Protocol, Sequence

from ..geo.model import Coordinate
from .model import LiveLocation

ONLINE = "online"
OFFLINE = "offline"


@dataclass(frozen=True)
class Marker:
    marker_id: int
    coordinate: Coordinate
    label: str
    color_category: str

    def as_dict(self) -> dict:
        return {
            "id": self.marker_id,
            "position": self.coordinate.as_dict(),
            "label": self.label,
            "color": self.color_category,
        }


class MarkerRenderer(Protocol):
    def add_marker(self, marker: Marker) -> None: ...

    def move_marker(self, marker: Marker) -> None: ...

    def remove_marker(self, marker_id: int) -> None: ...

    def clear(self) -> None: ...

    def fit_bounds(self, coordinates: Sequence[Coordinate]) -> None: ...


def to_marker(location: LiveLocation) -> Marker:
    return Marker(
        marker_id=location.user_id,
        coordinate=location.coordinate,
        label=f"{location.full_name} ({location.role.value})",
        color_category=ONLINE if location.online else OFFLINE,
    )


def build_markers(live: Mapping[int, LiveLocation]) -> List[Marker]:
    return [to_marker(live[user_id]) for user_id in sorted(live)]


class MarkerLayer:
    """Keeps a renderer's markers equal to the latest live feed.

    Updates move/add/remove only what changed. After `invalidate_size()` the
    next render clears and redraws everything, then fits the bounds.
    """

    def __init__(self, renderer: MarkerRenderer):
        self._renderer = renderer
        self._markers: Dict[int, Marker] = {}
        self._needs_full_redraw = True

    @property
    def markers(self) -> Dict[int, Marker]:
        return dict(self._markers)

    def invalidate_size(self) -> None:
        self._needs_full_redraw = True

    def render(self, live: Mapping[int, LiveLocation]) -> None:
        wanted = {m.marker_id: m for m in build_markers(live)}

        if self._needs_full_redraw:
            self._renderer.clear()
            for marker in wanted.values():
                self._renderer.add_marker(marker)
            self._markers = wanted
            self._needs_full_redraw = False
            if wanted:
                self._renderer.fit_bounds([m.coordinate for m in wanted.values()])
            return

        for marker_id in [mid for mid in self._markers if mid not in wanted]:
            self._renderer.remove_marker(marker_id)
            del self._markers[marker_id]

        for marker_id, marker in wanted.items():
            current: Optional[Marker] = self._markers.get(marker_id)
            if current is None:
                self._renderer.add_marker(marker)
            elif current != marker:
                self._renderer.move_marker(marker)
            self._markers[marker_id] = marker
