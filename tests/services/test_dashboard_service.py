from datetime import timedelta

from fakes import DOWNTOWN, FakeAIService, north_of
from fieldforce.core.enums import Role
from fieldforce.dashboard.service import DashboardService
from fieldforce.tracking.service import LocationService
from fieldforce.users.model import Viewer


def _dashboard(repos, ai=None):
    locations = LocationService(repos.locations, repos.users)
    return DashboardService(repos.users, repos.attendance, locations, ai or FakeAIService()), locations


def test_branch_admin_summary(repos, attendance_service, fixed_now):
    dashboard, locations = _dashboard(repos)
    attendance_service.check_in(3, north_of(DOWNTOWN, 10), now=fixed_now)
    locations.record_sample(3, north_of(DOWNTOWN, 10), captured_at=fixed_now - timedelta(minutes=2))
    locations.record_sample(5, north_of(DOWNTOWN, 10), captured_at=fixed_now - timedelta(minutes=30))

    summary = dashboard.summary(Viewer(2, Role.BRANCH_ADMIN, 1), now=fixed_now)

    # Officer A and Driver C; the admin is not counted.
    assert summary.total_staff == 2
    assert summary.active_field_visits == 1
    assert summary.attendance_rate == 50.0

    rows = {r.full_name: r for r in summary.staff}
    assert rows["Officer A"].status == "present"
    assert rows["Officer A"].online is True
    assert rows["Driver C"].status == "not-started"
    assert rows["Driver C"].online is False
    assert rows["Driver C"].last_seen == fixed_now - timedelta(minutes=30)


def test_empty_staff_has_zero_rate(repos, fixed_now):
    dashboard, _ = _dashboard(repos)
    summary = dashboard.summary(Viewer(2, Role.BRANCH_ADMIN, 99), now=fixed_now)
    assert summary.total_staff == 0
    assert summary.attendance_rate == 0.0


def test_insight_sends_checked_in_rows(repos, attendance_service, fixed_now):
    ai = FakeAIService()
    dashboard, _ = _dashboard(repos, ai)
    attendance_service.check_in(3, north_of(DOWNTOWN, 10), now=fixed_now)

    insight = dashboard.insight(Viewer(1, Role.SUPER_ADMIN, None), now=fixed_now)

    assert insight.summary == "1 checked in"
    assert ai.summaries == [[{"user": "Officer A", "status": "present", "time": "09:00"}]]
