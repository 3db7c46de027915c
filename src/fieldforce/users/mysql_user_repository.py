from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_COLUMNS = (
    "user_id, full_name, username, password_hash, role, branch_id, is_active, phone_number, bio, staff_pin"
)


def _to_user(row: dict) -> User:
    branch_id = row.get("branch_id")
    return User(
        user_id=int(row["user_id"]),
        full_name=row["full_name"],
        username=row["username"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        branch_id=int(branch_id) if branch_id is not None else None,
        is_active=bool(row.get("is_active", True)),
        phone_number=row.get("phone_number"),
        bio=row.get("bio"),
        staff_pin=row.get("staff_pin"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (user_id,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE username=%s", (username,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def list_active(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE is_active=1 ORDER BY full_name")
            return [_to_user(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(full_name, username, password_hash, role, branch_id, staff_pin, is_active)
                VALUES(%s,%s,%s,%s,%s,%s,1)
                """,
                (full_name, username, password_hash, role.value, branch_id, staff_pin),
            )
            return int(cur.lastrowid)

    def update_profile(
        self,
        user_id: int,
        *,
        full_name: str,
        phone_number: Optional[str],
        bio: Optional[str],
        staff_pin: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE users
                SET full_name=%s, phone_number=%s, bio=%s, staff_pin=%s
                WHERE user_id=%s
                """,
                (full_name, phone_number, bio, staff_pin, user_id),
            )
            # rowcount is 0 for an unchanged row too
            cur.execute("SELECT 1 AS found FROM users WHERE user_id=%s", (user_id,))
            return fetchone(cur) is not None

    def delete_with_activity(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM movement_logs WHERE user_id=%s", (user_id,))
            cur.execute("DELETE FROM attendance_records WHERE user_id=%s", (user_id,))
            cur.execute("DELETE FROM users WHERE user_id=%s", (user_id,))
            return cur.rowcount > 0
