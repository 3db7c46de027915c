from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def list_active(self) -> Sequence[User]:
        """Roster of active users, used by live-location aggregation and dashboards."""

        raise NotImplementedError

    def create_user(
        self,
        *,
        full_name: str,
        username: str,
        password_hash: str,
        role: Role,
        branch_id: Optional[int],
        staff_pin: Optional[str] = None,
    ) -> int:
        """Raises DuplicateRecordError when the username is taken."""

        raise NotImplementedError

    def update_profile(
        self,
        user_id: int,
        *,
        full_name: str,
        phone_number: Optional[str],
        bio: Optional[str],
        staff_pin: Optional[str],
    ) -> bool:
        raise NotImplementedError

    def delete_with_activity(self, user_id: int) -> bool:
        """Delete movement logs, attendance records and the user in one transaction.

        Returns False when the user does not exist.
        """

        raise NotImplementedError
