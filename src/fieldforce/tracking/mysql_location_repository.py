from __future__ import annotations

from datetime import datetime
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from ..geo.model import Coordinate
from .model import LocationSample
from .repository import LocationRepository


class MySQLLocationRepository(LocationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, *, user_id: int, coordinate: Coordinate, captured_at: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO movement_logs(user_id, latitude, longitude, captured_at)
                VALUES(%s,%s,%s,%s)
                """,
                (user_id, coordinate.latitude, coordinate.longitude, captured_at),
            )
            return int(cur.lastrowid)

    def list_since(self, since: datetime) -> Sequence[LocationSample]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT sample_id, user_id, latitude, longitude, captured_at
                FROM movement_logs
                WHERE captured_at >= %s
                ORDER BY captured_at DESC, sample_id DESC
                """,
                (since,),
            )
            return [
                LocationSample(
                    sample_id=int(r["sample_id"]),
                    user_id=int(r["user_id"]),
                    coordinate=Coordinate(float(r["latitude"]), float(r["longitude"])),
                    captured_at=r["captured_at"],
                )
                for r in fetchall(cur)
            ]
