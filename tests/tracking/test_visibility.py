from datetime import datetime, timedelta

from fieldforce.core.enums import Role
from fieldforce.geo.model import Coordinate
from fieldforce.tracking.model import LocationSample
from fieldforce.tracking.visibility import aggregate_live_locations, is_visible_to, latest_per_user
from fieldforce.users.model import Viewer

NOW = datetime(2026, 3, 2, 12, 0, 0)


def _sample(sample_id, user_id, minutes_ago, lat=23.81, lng=90.41):
    return LocationSample(sample_id, user_id, Coordinate(lat, lng), NOW - timedelta(minutes=minutes_ago))


def test_visibility_rule_per_role(roster):
    officer_a, officer_b = roster[3], roster[4]

    super_admin = Viewer(1, Role.SUPER_ADMIN, None)
    branch_admin = Viewer(2, Role.BRANCH_ADMIN, 1)
    officer = Viewer(3, Role.OFFICER, 1)

    assert is_visible_to(super_admin, officer_a) and is_visible_to(super_admin, officer_b)
    assert is_visible_to(branch_admin, officer_a)
    assert not is_visible_to(branch_admin, officer_b)
    assert is_visible_to(officer, officer_a)
    assert not is_visible_to(officer, roster[5])


def test_branch_admin_without_branch_sees_nobody(roster):
    assert not is_visible_to(Viewer(2, Role.BRANCH_ADMIN, None), roster[6])


def test_latest_sample_wins_regardless_of_input_order():
    older = _sample(1, 3, 5, lat=1.0)
    newer = _sample(2, 3, 1, lat=2.0)

    assert latest_per_user([older, newer])[3] is newer
    assert latest_per_user([newer, older])[3] is newer


def test_equal_timestamps_keep_store_order():
    first = _sample(1, 3, 2, lat=1.0)
    second = _sample(2, 3, 2, lat=2.0)
    assert latest_per_user([first, second])[3] is first


def test_branch_admin_gets_only_own_branch(roster):
    samples = [_sample(1, 3, 1), _sample(2, 4, 1), _sample(3, 5, 1)]
    live = aggregate_live_locations(samples, roster.values(), Viewer(2, Role.BRANCH_ADMIN, 1), now=NOW)
    assert sorted(live) == [3, 5]


def test_super_admin_sees_every_latest_sample(roster):
    samples = [_sample(1, 3, 1), _sample(2, 4, 1), _sample(3, 3, 0)]
    live = aggregate_live_locations(samples, roster.values(), Viewer(1, Role.SUPER_ADMIN, None), now=NOW)
    assert sorted(live) == [3, 4]
    assert live[3].captured_at == NOW


def test_officer_sees_only_self(roster):
    samples = [_sample(1, 3, 1), _sample(2, 5, 1)]
    live = aggregate_live_locations(samples, roster.values(), Viewer(3, Role.OFFICER, 1), now=NOW)
    assert list(live) == [3]


def test_stale_sample_is_kept_but_offline(roster):
    samples = [_sample(1, 3, 11), _sample(2, 5, 9)]
    live = aggregate_live_locations(
        samples, roster.values(), Viewer(1, Role.SUPER_ADMIN, None), now=NOW, stale_after=timedelta(minutes=10)
    )
    assert live[3].online is False
    assert live[5].online is True


def test_samples_from_unknown_users_are_skipped(roster):
    live = aggregate_live_locations([_sample(1, 999, 1)], roster.values(), Viewer(1, Role.SUPER_ADMIN, None), now=NOW)
    assert live == {}
