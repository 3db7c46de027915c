from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Branch
from .repository import BranchRepository


def _to_branch(r: dict) -> Branch:
    return Branch(
        branch_id=int(r["branch_id"]),
        name=r["name"],
        latitude=float(r["latitude"]),
        longitude=float(r["longitude"]),
        radius_meters=float(r["radius_meters"]),
    )


class MySQLBranchRepository(BranchRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, branch_id: int) -> Optional[Branch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT branch_id, name, latitude, longitude, radius_meters
                FROM branches
                WHERE branch_id=%s
                """,
                (branch_id,),
            )
            r = fetchone(cur)
            return _to_branch(r) if r else None

    def list_all(self) -> Sequence[Branch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT branch_id, name, latitude, longitude, radius_meters
                FROM branches
                ORDER BY branch_id
                """
            )
            return [_to_branch(r) for r in fetchall(cur)]
