from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .ai.service import AITextService, build_text_service
from .attendance.factory import CheckoutStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .branches.mysql_branch_repository import MySQLBranchRepository
from .branches.repository import BranchRepository
from .config import FieldForceSettings
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .expenses.mysql_expense_repository import MySQLExpenseRepository, MySQLVehicleRepository
from .expenses.repository import ExpenseRepository, VehicleRepository
from .expenses.service import ExpenseService
from .reports.service import AttendanceReportService
from .storage.blob_store import BlobStore, LocalBlobStore
from .tracking.mysql_location_repository import MySQLLocationRepository
from .tracking.position import PositionProvider
from .tracking.repository import LocationRepository
from .tracking.scheduler import RefreshScheduler
from .tracking.service import FieldVisitService, LocationService
from .tracking.session import TrackingSession
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    settings: FieldForceSettings

    users_repo: UserRepository
    branches_repo: BranchRepository
    attendance_repo: AttendanceRepository
    locations_repo: LocationRepository
    vehicles_repo: VehicleRepository
    expenses_repo: ExpenseRepository

    auth_service: AuthService
    user_service: UserService
    attendance_service: AttendanceService
    location_service: LocationService
    field_visit_service: FieldVisitService
    dashboard_service: DashboardService
    expense_service: ExpenseService
    report_service: AttendanceReportService
    ai_service: AITextService

    def tracking_session(self, user_id: int, provider: PositionProvider) -> TrackingSession:
        return TrackingSession(
            user_id,
            provider,
            self.location_service,
            interval=self.settings.tracking_interval_seconds,
            timeout=self.settings.position_timeout_seconds,
        )

    def refresh_scheduler(self) -> RefreshScheduler:
        return RefreshScheduler(self.location_service, refresh_interval=self.settings.live_refresh_seconds)


def assemble_container(
    *,
    settings: FieldForceSettings,
    users_repo: UserRepository,
    branches_repo: BranchRepository,
    attendance_repo: AttendanceRepository,
    locations_repo: LocationRepository,
    vehicles_repo: VehicleRepository,
    expenses_repo: ExpenseRepository,
    blobs: Optional[BlobStore] = None,
    ai_service: Optional[AITextService] = None,
) -> Container:
    """Wire services over any repository implementations (MySQL or in-memory)."""

    ai_service = ai_service or build_text_service(
        settings.gemini_api_key,
        model=settings.gemini_model,
        timeout=settings.ai_timeout_seconds,
    )
    blobs = blobs or LocalBlobStore(settings.blob_root, settings.blob_base_url)

    attendance_service = AttendanceService(
        attendance_repo,
        users_repo,
        branches_repo,
        strategy_factory=CheckoutStrategyFactory.from_setting(settings.checkout_status_policy),
        tolerance_meters=settings.geofence_tolerance_meters,
    )
    location_service = LocationService(
        locations_repo,
        users_repo,
        live_window=settings.live_window,
        stale_after=settings.stale_after,
    )

    return Container(
        settings=settings,
        users_repo=users_repo,
        branches_repo=branches_repo,
        attendance_repo=attendance_repo,
        locations_repo=locations_repo,
        vehicles_repo=vehicles_repo,
        expenses_repo=expenses_repo,
        auth_service=AuthService(users_repo, branches_repo),
        user_service=UserService(users_repo, branches_repo),
        attendance_service=attendance_service,
        location_service=location_service,
        field_visit_service=FieldVisitService(attendance_service),
        dashboard_service=DashboardService(users_repo, attendance_repo, location_service, ai_service),
        expense_service=ExpenseService(expenses_repo, vehicles_repo, blobs),
        report_service=AttendanceReportService(attendance_repo),
        ai_service=ai_service,
    )


def build_container(*, db_config: dict, settings: Optional[FieldForceSettings] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble_container(
        settings=settings or FieldForceSettings(),
        users_repo=MySQLUserRepository(conn),
        branches_repo=MySQLBranchRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        locations_repo=MySQLLocationRepository(conn),
        vehicles_repo=MySQLVehicleRepository(conn),
        expenses_repo=MySQLExpenseRepository(conn),
    )
