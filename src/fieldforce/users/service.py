from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..branches.repository import BranchRepository
from ..common.validators import require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, DuplicateRecordError, ValidationError
from ..tracking.visibility import is_visible_to
from .model import User, Viewer
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    full_name: str
    role: Role
    branch_id: Optional[int]
    branch_name: str

    @property
    def viewer(self) -> Viewer:
        return Viewer(user_id=self.user_id, role=self.role, branch_id=self.branch_id)


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository, branches: Optional[BranchRepository] = None):
        self._users = users
        self._branches = branches

    def _branch_name(self, branch_id: Optional[int]) -> str:
        if branch_id is None or not self._branches:
            return "-"
        branch = self._branches.get_by_id(branch_id)
        return branch.name if branch else "-"

    def authenticate(self, username: str, password: str) -> SessionUser:
        username = require_non_empty(username or "", "Username")
        user = self._users.get_by_username(username)
        if not user or not user.is_active:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid username or password")

        return SessionUser(
            user_id=user.user_id,
            full_name=user.full_name,
            role=user.role,
            branch_id=user.branch_id,
            branch_name=self._branch_name(user.branch_id),
        )


SELF_SERVICE_ROLES = (Role.OFFICER, Role.DRIVER)
MIN_PASSWORD_LENGTH = 6


def _optional_text(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


class UserService:
    """Use case: accounts (sign-up, admin create/remove) and own profile."""

    def __init__(self, users: UserRepository, branches: BranchRepository):
        self._users = users
        self._branches = branches

    def _create(
        self,
        *,
        full_name: str,
        username: str,
        password: str,
        role: Role,
        branch_id: Optional[int],
        staff_pin: Optional[str],
    ) -> User:
        full_name = require_non_empty(full_name or "", "Full name")
        username = require_non_empty(username or "", "Username").lower()
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        if branch_id is not None and not self._branches.get_by_id(branch_id):
            raise ValidationError("Branch does not exist")
        if self._users.get_by_username(username):
            raise ValidationError("Username is already taken")

        try:
            user_id = self._users.create_user(
                full_name=full_name,
                username=username,
                password_hash=generate_password_hash(password),
                role=role,
                branch_id=branch_id,
                staff_pin=_optional_text(staff_pin),
            )
        except DuplicateRecordError:
            raise ValidationError("Username is already taken") from None

        logger.info("Created %s account %s (id=%s)", role.value, username, user_id)
        return self._users.get_by_id(user_id)

    def register(
        self,
        *,
        full_name: str,
        username: str,
        password: str,
        role: Role = Role.OFFICER,
        branch_id: Optional[int] = None,
    ) -> User:
        """Self sign-up. Admin accounts are only created by an administrator."""

        if role not in SELF_SERVICE_ROLES:
            raise AuthorizationError("Administrator accounts cannot be self-registered")
        return self._create(
            full_name=full_name,
            username=username,
            password=password,
            role=role,
            branch_id=branch_id,
            staff_pin=None,
        )

    def create_user(
        self,
        viewer: Viewer,
        *,
        full_name: str,
        username: str,
        password: str,
        role: Role,
        branch_id: Optional[int],
        staff_pin: Optional[str] = None,
    ) -> User:
        if not viewer.role.is_admin:
            raise AuthorizationError("Only administrators can add staff")

        # Branch admins only staff their own branch with officers.
        if viewer.role == Role.BRANCH_ADMIN:
            role, branch_id = Role.OFFICER, viewer.branch_id
        if branch_id is None:
            raise ValidationError("Select a branch")

        return self._create(
            full_name=full_name,
            username=username,
            password=password,
            role=role,
            branch_id=branch_id,
            staff_pin=staff_pin,
        )

    def update_profile(
        self,
        viewer: Viewer,
        *,
        full_name: str,
        phone_number: Optional[str] = None,
        bio: Optional[str] = None,
        staff_pin: Optional[str] = None,
    ) -> User:
        full_name = require_non_empty(full_name or "", "Full name")
        if not self._users.update_profile(
            viewer.user_id,
            full_name=full_name,
            phone_number=_optional_text(phone_number),
            bio=_optional_text(bio),
            staff_pin=_optional_text(staff_pin),
        ):
            raise ValidationError("User does not exist")
        return self._users.get_by_id(viewer.user_id)

    def remove_user(self, viewer: Viewer, user_id: int) -> None:
        """Delete a staff member together with their movement logs and attendance."""

        if not viewer.role.is_admin:
            raise AuthorizationError("Only administrators can remove staff")
        if user_id == viewer.user_id:
            raise AuthorizationError("You cannot remove yourself")

        user = self._users.get_by_id(user_id)
        if not user:
            raise ValidationError("User does not exist")
        if not is_visible_to(viewer, user):
            raise AuthorizationError("This user belongs to another branch")

        if not self._users.delete_with_activity(user_id):
            raise ValidationError("User does not exist")
        logger.info("User %s removed by %s", user_id, viewer.user_id)
