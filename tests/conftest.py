from __future__ import annotations

from datetime import datetime
from types import SimpleNamespace

import pytest
from werkzeug.security import generate_password_hash

from fakes import (
    BROKEN,
    DOWNTOWN,
    UPTOWN,
    InMemoryAttendance,
    InMemoryBlobStore,
    InMemoryBranches,
    InMemoryExpenses,
    InMemoryLocations,
    InMemoryUsers,
    InMemoryVehicles,
)
from fieldforce.attendance.service import AttendanceService
from fieldforce.core.enums import Role, VehicleType
from fieldforce.expenses.model import Vehicle
from fieldforce.users.model import User

def _user(user_id: int, name: str, role: Role, branch_id, *, password: str = "pw") -> User:
    return User(
        user_id=user_id,
        full_name=name,
        username=name.lower().replace(" ", "_"),
        password_hash=generate_password_hash(password),
        role=role,
        branch_id=branch_id,
    )

@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 9, 0, 0)

@pytest.fixture
def roster() -> dict[int, User]:
    users = [
        _user(1, "Super Admin", Role.SUPER_ADMIN, None),
        _user(2, "Downtown Admin", Role.BRANCH_ADMIN, 1),
        _user(3, "Officer A", Role.OFFICER, 1),
        _user(4, "Officer B", Role.OFFICER, 2),
        _user(5, "Driver C", Role.DRIVER, 1),
        _user(6, "Officer Nobranch", Role.OFFICER, None),
        _user(7, "Officer Broken", Role.OFFICER, 3),
    ]
    return {u.user_id: u for u in users}

@pytest.fixture
def repos(roster):
    users = InMemoryUsers(dict(roster))
    branches = InMemoryBranches({b.branch_id: b for b in (DOWNTOWN, UPTOWN, BROKEN)})
    attendance = InMemoryAttendance(users, branches)
    locations = InMemoryLocations()
    users.dependents = [attendance, locations]
    return SimpleNamespace(
        users=users,
        branches=branches,
        attendance=attendance,
        locations=locations,
        vehicles=InMemoryVehicles(
            {
                10: Vehicle(vehicle_id=10, name="Car 1", vehicle_type=VehicleType.CAR),
                11: Vehicle(vehicle_id=11, name="Bike 1", vehicle_type=VehicleType.MOTORCYCLE),
            }
        ),
        expenses=InMemoryExpenses(),
        blobs=InMemoryBlobStore(),
    )

@pytest.fixture
def attendance_service(repos) -> AttendanceService:
    return AttendanceService(repos.attendance, repos.users, repos.branches, tolerance_meters=20)
