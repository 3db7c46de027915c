"""Role-scoped visibility and latest-per-user aggregation of location samples."""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, Iterable, List

from ..core.constants import DEFAULT_STALE_AFTER_MINUTES
from ..core.enums import Role
from ..users.model import User, Viewer
from .model import LiveLocation, LocationSample


def is_visible_to(viewer: Viewer, candidate: User) -> bool:
    """Single visibility rule shared by the live map, dashboard and reports.

    - SUPER_ADMIN sees everyone.
    - BRANCH_ADMIN sees users of the same branch.
    - Anyone else sees only themselves.
    """

    if viewer.role == Role.SUPER_ADMIN:
        return True
    if viewer.role == Role.BRANCH_ADMIN:
        return viewer.branch_id is not None and candidate.branch_id == viewer.branch_id
    return candidate.user_id == viewer.user_id


def latest_per_user(samples: Iterable[LocationSample]) -> Dict[int, LocationSample]:
    # Stable sort keeps the store's order for equal timestamps.
    ordered = sorted(samples, key=lambda s: s.captured_at, reverse=True)
    latest: Dict[int, LocationSample] = {}
    for sample in ordered:
        if sample.user_id not in latest:
            latest[sample.user_id] = sample
    return latest


def is_online(sample: LocationSample, *, now: datetime, stale_after: timedelta) -> bool:
    return now - sample.captured_at < stale_after


def aggregate_live_locations(
    samples: Iterable[LocationSample],
    roster: Iterable[User],
    viewer: Viewer,
    *,
    now: datetime,
    stale_after: timedelta = timedelta(minutes=DEFAULT_STALE_AFTER_MINUTES),
) -> Dict[int, LiveLocation]:
    """Map user_id -> latest visible position, flagged online/offline.

    Stale samples stay in the output (last known position) with online=False.
    Samples from users missing in the roster are skipped.
    """

    users = {u.user_id: u for u in roster}
    out: Dict[int, LiveLocation] = {}

    for user_id, sample in latest_per_user(samples).items():
        user = users.get(user_id)
        if user is None or not is_visible_to(viewer, user):
            continue
        out[user_id] = LiveLocation(
            user_id=user.user_id,
            full_name=user.full_name,
            role=user.role,
            branch_id=user.branch_id,
            coordinate=sample.coordinate,
            captured_at=sample.captured_at,
            online=is_online(sample, now=now, stale_after=stale_after),
        )
    return out


def visible_users(roster: Iterable[User], viewer: Viewer) -> List[User]:
    return [u for u in roster if is_visible_to(viewer, u)]
