from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a staff member.

    Note: Plain data object (no DB access code here).
    """

    user_id: int
    full_name: str
    username: str
    password_hash: str
    role: Role
    branch_id: Optional[int]
    is_active: bool = True
    phone_number: Optional[str] = None
    bio: Optional[str] = None
    staff_pin: Optional[str] = None

    @property
    def viewer(self) -> "Viewer":
        return Viewer(user_id=self.user_id, role=self.role, branch_id=self.branch_id)

    def as_profile(self) -> dict:
        return {
            "user_id": self.user_id,
            "full_name": self.full_name,
            "username": self.username,
            "role": self.role.value,
            "branch_id": self.branch_id,
            "phone_number": self.phone_number,
            "bio": self.bio,
            "staff_pin": self.staff_pin,
        }


@dataclass(frozen=True)
class Viewer:
    """The acting user; decides what data is visible."""

    user_id: int
    role: Role
    branch_id: Optional[int]
