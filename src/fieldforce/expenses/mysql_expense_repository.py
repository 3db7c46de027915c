from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import ExpenseType, FuelType, VehicleType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Expense, Vehicle
from .repository import ExpenseRepository, VehicleRepository

_COLUMNS = (
    "expense_id, user_id, vehicle_id, expense_type, fuel_type, amount, quantity, "
    "odometer, description, voucher_url, expense_date"
)


def _opt_float(value) -> Optional[float]:
    return float(value) if value is not None else None


def _to_expense(r: dict) -> Expense:
    return Expense(
        expense_id=int(r["expense_id"]),
        user_id=int(r["user_id"]),
        vehicle_id=int(r["vehicle_id"]) if r.get("vehicle_id") is not None else None,
        expense_type=ExpenseType(r["expense_type"]),
        fuel_type=FuelType(r["fuel_type"]) if r.get("fuel_type") else None,
        amount=float(r["amount"]),
        quantity=_opt_float(r.get("quantity")),
        odometer=_opt_float(r.get("odometer")),
        description=r.get("description") or "",
        voucher_url=r.get("voucher_url"),
        expense_date=r["expense_date"],
    )


def _to_vehicle(r: dict) -> Vehicle:
    return Vehicle(
        vehicle_id=int(r["vehicle_id"]),
        name=r["name"],
        vehicle_type=VehicleType(r["vehicle_type"]),
    )


class MySQLVehicleRepository(VehicleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, vehicle_id: int) -> Optional[Vehicle]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT vehicle_id, name, vehicle_type FROM vehicles WHERE vehicle_id=%s", (vehicle_id,))
            r = fetchone(cur)
            return _to_vehicle(r) if r else None

    def list_all(self) -> Sequence[Vehicle]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT vehicle_id, name, vehicle_type FROM vehicles ORDER BY vehicle_id")
            return [_to_vehicle(r) for r in fetchall(cur)]


class MySQLExpenseRepository(ExpenseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        vehicle_id: Optional[int],
        expense_type: ExpenseType,
        fuel_type: Optional[FuelType],
        amount: float,
        quantity: Optional[float],
        odometer: Optional[float],
        description: str,
        voucher_url: Optional[str],
        expense_date: date,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO expenses(user_id, vehicle_id, expense_type, fuel_type, amount, quantity,
                                     odometer, description, voucher_url, expense_date)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    user_id,
                    vehicle_id,
                    expense_type.value,
                    fuel_type.value if fuel_type else None,
                    amount,
                    quantity,
                    odometer,
                    description or None,
                    voucher_url,
                    expense_date,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, expense_id: int) -> Optional[Expense]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM expenses WHERE expense_id=%s", (expense_id,))
            r = fetchone(cur)
            return _to_expense(r) if r else None

    def list_between(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[Expense]:
        where = ["expense_date BETWEEN %s AND %s"]
        params: list = [start_date, end_date]
        if user_id is not None:
            where.append("user_id=%s")
            params.append(user_id)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM expenses
                WHERE {' AND '.join(where)}
                ORDER BY expense_date DESC, expense_id DESC
                """,
                tuple(params),
            )
            return [_to_expense(r) for r in fetchall(cur)]
