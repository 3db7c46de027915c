from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceState, AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance record per (user, day)."""

    attendance_id: int
    user_id: int
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    note: Optional[str] = None

    @property
    def state(self) -> AttendanceState:
        if self.check_out_time is not None:
            return AttendanceState.CHECKED_OUT
        return AttendanceState.CHECKED_IN


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for reports (joined with user and branch)."""

    user_id: int
    full_name: str
    role: str
    branch_id: Optional[int]
    branch_name: Optional[str]
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    note: Optional[str] = None
