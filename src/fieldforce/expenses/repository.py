from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import ExpenseType, FuelType
from .model import Expense, Vehicle


class VehicleRepository(Protocol):
    def get_by_id(self, vehicle_id: int) -> Optional[Vehicle]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Vehicle]:
        raise NotImplementedError


class ExpenseRepository(Protocol):
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
        raise NotImplementedError

    def get_by_id(self, expense_id: int) -> Optional[Expense]:
        raise NotImplementedError

    def list_between(
        self,
        *,
        start_date: date,
        end_date: date,
        user_id: Optional[int] = None,
    ) -> Sequence[Expense]:
        """Expenses in [start_date, end_date], newest date first."""

        raise NotImplementedError
