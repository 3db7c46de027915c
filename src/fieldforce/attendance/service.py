from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..branches.model import Branch
from ..branches.repository import BranchRepository
from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_GEOFENCE_TOLERANCE_METERS, DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceState, AttendanceStatus
from ..core.exceptions import (
    AlreadyCheckedOut,
    ConfigurationError,
    DuplicateCheckIn,
    DuplicateRecordError,
    GeofenceViolation,
    LocationUnavailable,
    NotCheckedIn,
    PersistenceError,
    ValidationError,
)
from ..geo.model import Coordinate
from ..users.model import User
from ..users.repository import UserRepository
from .factory import CheckoutStrategyFactory
from .model import AttendanceRecord
from .repository import AttendanceRepository
from .strategies.base import classify_position

logger = logging.getLogger(__name__)


class AttendanceService:
    """Geofenced check-in/check-out lifecycle per (user, day).

    NOT_STARTED -> CHECKED_IN -> CHECKED_OUT, one direction only. Nothing is
    reported as done until the store has confirmed it.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        branches: BranchRepository,
        *,
        strategy_factory: CheckoutStrategyFactory | None = None,
        tolerance_meters: float = DEFAULT_GEOFENCE_TOLERANCE_METERS,
    ):
        self._attendance = attendance
        self._users = users
        self._branches = branches
        self._factory = strategy_factory or CheckoutStrategyFactory()
        self._tolerance = max(float(tolerance_meters), 0.0)

    @property
    def tolerance_meters(self) -> float:
        return self._tolerance

    def _get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(user_id)
        if not user:
            raise ValidationError("User does not exist")
        return user

    def get_assigned_branch(self, user: User) -> Branch:
        if user.branch_id is None:
            raise ConfigurationError("No branch is assigned to this user. Contact your administrator.")
        branch = self._branches.get_by_id(user.branch_id)
        if not branch:
            raise ConfigurationError("Assigned branch was not found. Contact your administrator.")
        if branch.radius_meters <= 0:
            raise ConfigurationError(f"Branch {branch.name} has no valid geofence radius.")
        return branch

    def _reload(self, user_id: int, work_date: date) -> AttendanceRecord:
        record = self._attendance.get_for_user_and_date(user_id, work_date)
        if not record:
            raise PersistenceError("Attendance record was not found after saving")
        return record

    def check_in(self, user_id: int, position: Optional[Coordinate], *, now: datetime | None = None) -> AttendanceRecord:
        if position is None:
            raise LocationUnavailable()

        now = now or now_local()
        today = now.date()

        user = self._get_user(user_id)
        branch = self.get_assigned_branch(user)

        existing = self._attendance.get_for_user_and_date(user_id, today)
        if existing:
            raise DuplicateCheckIn("You have already checked in today")

        fence = branch.geofence
        distance = fence.distance_to(position)
        if not fence.contains(position, self._tolerance):
            logger.info("Check-in rejected for user %s: %.1fm from %s", user_id, distance, branch.name)
            raise GeofenceViolation(
                distance_meters=distance,
                overage_meters=distance - fence.radius_meters,
                branch_name=branch.name,
            )

        try:
            self._attendance.create_checkin(
                user_id=user_id,
                work_date=today,
                check_in_time=now,
                status=AttendanceStatus.PRESENT,
            )
        except DuplicateRecordError:
            # Another device won the race on (user_id, work_date).
            raise DuplicateCheckIn("You have already checked in today") from None

        logger.info("User %s checked in at %s (%.1fm)", user_id, branch.name, distance)
        return self._reload(user_id, today)

    def check_out(
        self,
        user_id: int,
        position: Optional[Coordinate] = None,
        *,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()

        record = self._attendance.get_for_user_and_date(user_id, today)
        if not record:
            raise NotCheckedIn("You have not checked in today")
        if record.check_out_time is not None:
            raise AlreadyCheckedOut("You have already checked out today")

        fence = None
        if position is not None:
            try:
                fence = self.get_assigned_branch(self._get_user(user_id)).geofence
            except ConfigurationError as e:
                logger.warning("Checkout for user %s without geofence test: %s", user_id, e)

        strategy = self._factory.for_checkout()
        decision = strategy.decide_checkout(
            current=record.status,
            position=position,
            fence=fence,
            tolerance_meters=self._tolerance,
        )

        closed = self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out_time=now,
            status=decision.status,
            note=decision.note or record.note,
        )
        if not closed:
            raise AlreadyCheckedOut("You have already checked out today")

        logger.info("User %s checked out (%s)", user_id, decision.status.value)
        return self._reload(user_id, today)

    def reevaluate_status(
        self,
        user_id: int,
        position: Coordinate,
        *,
        now: datetime | None = None,
    ) -> Optional[AttendanceRecord]:
        """Re-classify today's open record as present/on-field from a position.

        Returns None when there is nothing to update (not checked in, or closed).
        """

        now = now or now_local()
        today = now.date()

        record = self._attendance.get_for_user_and_date(user_id, today)
        if not record or record.check_out_time is not None:
            return None

        branch = self.get_assigned_branch(self._get_user(user_id))
        status = classify_position(branch.geofence, position, self._tolerance)
        if status == record.status:
            return record

        if not self._attendance.update_status(attendance_id=record.attendance_id, status=status):
            # Closed concurrently; closed records are terminal.
            return None
        logger.info("User %s status %s -> %s", user_id, record.status.value, status.value)
        return self._reload(user_id, today)

    def get_today_record(self, user_id: int, today: date) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_user_and_date(user_id, today)

    def get_state(self, user_id: int, today: date) -> AttendanceState:
        record = self._attendance.get_for_user_and_date(user_id, today)
        return record.state if record else AttendanceState.NOT_STARTED

    def get_history_ui(self, user_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> list[dict]:
        rows = self._attendance.get_recent_for_user(user_id, limit)
        return [self._to_ui(r) for r in rows]

    def _to_ui(self, r: AttendanceRecord) -> dict:
        label = {
            AttendanceStatus.PRESENT: "Present",
            AttendanceStatus.ON_FIELD: "On field",
            AttendanceStatus.ABSENT: "Absent",
        }.get(r.status, r.status.value)

        return {
            "date": r.work_date.strftime("%Y-%m-%d"),
            "check_in": r.check_in_time.strftime("%H:%M:%S") if r.check_in_time else "-",
            "check_out": r.check_out_time.strftime("%H:%M:%S") if r.check_out_time else "-",
            "status": r.status.value,
            "label": label,
            "state": r.state.value,
        }
