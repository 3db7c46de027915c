from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from ..ai.service import AITextService, AttendanceInsight
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..tracking.service import LocationService
from ..tracking.visibility import visible_users
from ..users.model import Viewer
from ..users.repository import UserRepository


@dataclass(frozen=True)
class StaffRow:
    user_id: int
    full_name: str
    role: str
    status: str
    check_in: Optional[datetime]
    last_seen: Optional[datetime]
    online: bool

    def as_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "full_name": self.full_name,
            "role": self.role,
            "status": self.status,
            "check_in": self.check_in.strftime("%H:%M") if self.check_in else None,
            "last_seen": self.last_seen.isoformat() if self.last_seen else None,
            "online": self.online,
        }


@dataclass(frozen=True)
class DashboardSummary:
    total_staff: int
    active_field_visits: int
    attendance_rate: float
    staff: List[StaffRow]

    def as_dict(self) -> dict:
        return {
            "total_staff": self.total_staff,
            "active_field_visits": self.active_field_visits,
            "attendance_rate": self.attendance_rate,
            "staff": [s.as_dict() for s in self.staff],
        }


class DashboardService:
    """Today's numbers for the staff the viewer manages."""

    def __init__(
        self,
        users: UserRepository,
        attendance: AttendanceRepository,
        locations: LocationService,
        ai: AITextService,
    ):
        self._users = users
        self._attendance = attendance
        self._locations = locations
        self._ai = ai

    def summary(self, viewer: Viewer, *, now: Optional[datetime] = None) -> DashboardSummary:
        now = now or now_local()

        staff = [u for u in visible_users(self._users.list_active(), viewer) if u.user_id != viewer.user_id]
        records = {r.user_id: r for r in self._attendance.list_for_date(now.date())}
        live = self._locations.live_feed(viewer, now=now)

        rows: List[StaffRow] = []
        for user in sorted(staff, key=lambda u: u.full_name):
            record = records.get(user.user_id)
            location = live.get(user.user_id)
            rows.append(
                StaffRow(
                    user_id=user.user_id,
                    full_name=user.full_name,
                    role=user.role.value,
                    status=record.status.value if record else "not-started",
                    check_in=record.check_in_time if record else None,
                    last_seen=location.captured_at if location else None,
                    online=bool(location and location.online),
                )
            )

        attended = sum(1 for u in staff if u.user_id in records)
        rate = round(100.0 * attended / len(staff), 1) if staff else 0.0

        return DashboardSummary(
            total_staff=len(staff),
            active_field_visits=sum(1 for r in rows if r.online),
            attendance_rate=rate,
            staff=rows,
        )

    def insight(self, viewer: Viewer, *, now: Optional[datetime] = None) -> AttendanceInsight:
        summary = self.summary(viewer, now=now)
        rows = [
            {
                "user": s.full_name,
                "status": s.status,
                "time": s.check_in.strftime("%H:%M") if s.check_in else None,
            }
            for s in summary.staff
            if s.check_in is not None
        ]
        return self._ai.summarize_attendance(rows)
