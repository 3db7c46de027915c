from datetime import date, datetime

from fieldforce.attendance.model import AttendanceReportRow
from fieldforce.core.enums import AttendanceStatus
from fieldforce.reports.calculator.standard_calculator import CheckInOutCalculator


def _row(check_in, check_out):
    return AttendanceReportRow(
        user_id=1,
        full_name="A",
        role="officer",
        branch_id=1,
        branch_name="Downtown Branch",
        work_date=date(2026, 3, 2),
        check_in_time=check_in,
        check_out_time=check_out,
        status=AttendanceStatus.PRESENT,
    )


def test_worked_minutes_between_check_in_and_out():
    row = _row(datetime(2026, 3, 2, 8, 0), datetime(2026, 3, 2, 17, 0, 59))
    assert CheckInOutCalculator().worked_minutes(row) == 9 * 60


def test_open_day_is_zero():
    assert CheckInOutCalculator().worked_minutes(_row(datetime(2026, 3, 2, 8, 0), None)) == 0


def test_clock_skew_never_goes_negative():
    row = _row(datetime(2026, 3, 2, 9, 0), datetime(2026, 3, 2, 8, 59))
    assert CheckInOutCalculator().worked_minutes(row) == 0
