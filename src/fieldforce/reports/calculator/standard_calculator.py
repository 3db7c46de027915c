from __future__ import annotations

from .base import WorkedTimeCalculator
from ...attendance.model import AttendanceReportRow


class CheckInOutCalculator(WorkedTimeCalculator):
    """(check-out - check-in) in whole minutes; open or incomplete days count 0."""

    def worked_minutes(self, row: AttendanceReportRow) -> int:
        if not row.check_in_time or not row.check_out_time:
            return 0
        minutes = int((row.check_out_time - row.check_in_time).total_seconds() // 60)
        return max(minutes, 0)
