from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class ConfigurationError(DomainError):
    """Raised when required setup is missing (e.g. no branch geofence assigned)."""


class LocationUnavailable(DomainError):
    """No usable position: permission denied, no signal or timeout. Retryable."""

    def __init__(self, message: str = "Current location is unavailable. Enable GPS and retry.", *, reason: Optional[str] = None):
        super().__init__(message)
        self.reason = reason


class GeofenceViolation(DomainError):
    """Expected business rejection: the position is outside the branch geofence."""

    def __init__(self, *, distance_meters: float, overage_meters: float, branch_name: str = ""):
        self.distance_meters = float(distance_meters)
        self.overage_meters = float(overage_meters)
        self.branch_name = branch_name
        where = f" for {branch_name}" if branch_name else ""
        super().__init__(f"You are {round(self.overage_meters)}m outside the geofence{where}.")


class DuplicateCheckIn(DomainError):
    """A record already exists for this user and day."""


class NotCheckedIn(DomainError):
    """Check-out requested without a check-in for the day."""


class AlreadyCheckedOut(DomainError):
    """The day's record is already closed."""


class PersistenceError(DomainError):
    """Record/blob store failure (network, constraint, driver). Retryable."""


class DuplicateRecordError(PersistenceError):
    """Unique constraint violated in the store."""


class AIServiceError(Exception):
    """AI text service unavailable, mis-configured or returned malformed output."""
