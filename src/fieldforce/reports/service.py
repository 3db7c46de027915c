from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import format_hhmm, parse_month
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..users.model import Viewer
from .calculator.base import WorkedTimeCalculator
from .calculator.standard_calculator import CheckInOutCalculator


@dataclass(frozen=True)
class ReportData:
    month: str
    rows: list[dict]
    summary: list[dict]


class AttendanceReportService:
    """Monthly attendance rows scoped by the viewer's role."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        calculator: Optional[WorkedTimeCalculator] = None,
    ):
        self._attendance = attendance
        self._calculator = calculator or CheckInOutCalculator()

    def monthly_rows(self, viewer: Viewer, month: str) -> ReportData:
        try:
            start, end = parse_month(month)
        except (TypeError, ValueError):
            raise ValidationError("Month must be in YYYY-MM format") from None

        branch_id = None
        user_id = None
        if viewer.role == Role.BRANCH_ADMIN:
            if viewer.branch_id is None:
                return ReportData(month=month, rows=[], summary=[])
            branch_id = viewer.branch_id
        elif viewer.role != Role.SUPER_ADMIN:
            user_id = viewer.user_id

        query_rows = self._attendance.get_report_rows(
            start_date=start,
            end_date=end,
            branch_id=branch_id,
            user_id=user_id,
        )
        query_rows = sorted(query_rows, key=lambda r: (r.work_date, r.full_name))

        summary_map: dict[int, dict] = {}
        out_rows: list[dict] = []

        for r in query_rows:
            minutes = self._calculator.worked_minutes(r)

            out_rows.append(
                {
                    "date": r.work_date.strftime("%Y-%m-%d"),
                    "user_id": r.user_id,
                    "full_name": r.full_name,
                    "role": r.role,
                    "branch_name": r.branch_name or "Unknown",
                    "status": r.status.value,
                    "check_in": r.check_in_time.strftime("%H:%M") if r.check_in_time else "-",
                    "check_out": r.check_out_time.strftime("%H:%M") if r.check_out_time else "-",
                    "worked_hours": format_hhmm(minutes),
                    "note": r.note or "",
                }
            )

            s = summary_map.setdefault(
                r.user_id,
                {"user_id": r.user_id, "full_name": r.full_name, "days": 0, "total_minutes": 0},
            )
            s["days"] += 1
            s["total_minutes"] += minutes

        summary = [
            {
                "user_id": s["user_id"],
                "full_name": s["full_name"],
                "days": s["days"],
                "total_hours": format_hhmm(int(s["total_minutes"])),
            }
            for s in sorted(summary_map.values(), key=lambda x: x["total_minutes"], reverse=True)
        ]
        return ReportData(month=month, rows=out_rows, summary=summary)
