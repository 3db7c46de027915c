from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for visibility and permissions."""

    SUPER_ADMIN = "super_admin"
    BRANCH_ADMIN = "branch_admin"
    OFFICER = "officer"
    DRIVER = "driver"

    @property
    def is_admin(self) -> bool:
        return self in (Role.SUPER_ADMIN, Role.BRANCH_ADMIN)


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the database."""

    PRESENT = "present"
    ON_FIELD = "on-field"
    ABSENT = "absent"


class AttendanceState(str, Enum):
    """Per (user, day) lifecycle derived from the stored record."""

    NOT_STARTED = "NOT_STARTED"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"


class CheckoutStatusPolicy(str, Enum):
    REEVALUATE = "reevaluate"
    KEEP = "keep"


class PositionErrorKind(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    UNAVAILABLE = "unavailable"
    TIMEOUT = "timeout"


class VehicleType(str, Enum):
    CAR = "car"
    MOTORCYCLE = "motorcycle"


class ExpenseType(str, Enum):
    FUEL = "fuel"
    MAINTENANCE = "maintenance"
    TOLL = "toll"
    COOKING_GAS = "cooking_gas"
    OTHER = "other"

    @property
    def needs_vehicle(self) -> bool:
        return self in (ExpenseType.FUEL, ExpenseType.MAINTENANCE, ExpenseType.TOLL)


class FuelType(str, Enum):
    LPG = "lpg"
    PETROL = "petrol"
    OCTANE = "octane"
    DIESEL = "diesel"
    BILL_99 = "99"
