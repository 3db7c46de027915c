from __future__ import annotations

import logging
import uuid
from datetime import date
from typing import List, Optional, Sequence

from ..common.datetime_utils import parse_month
from ..common.validators import optional_float, require_positive
from ..core.constants import VOUCHER_BUCKET
from ..core.enums import ExpenseType, FuelType, Role, VehicleType
from ..core.exceptions import PersistenceError, ValidationError
from ..storage.blob_store import BlobStore
from ..users.model import Viewer
from .model import CarFuelTotals, Expense, ExpenseReportRow, Vehicle, VoucherUpload
from .repository import ExpenseRepository, VehicleRepository

logger = logging.getLogger(__name__)


def fuel_quantity(amount: float, unit_price: Optional[float]) -> Optional[float]:
    """Litres (or units) bought: amount / unit price, 2 decimals."""
    if unit_price is None or unit_price <= 0:
        return None
    return round(amount / unit_price, 2)


def build_monthly_report(expenses: Sequence[Expense], vehicles: Sequence[Vehicle]) -> List[ExpenseReportRow]:
    """Per-day sheet: per-car fuel split, motorcycle total, toll, maintenance, cooking gas."""

    by_id = {v.vehicle_id: v for v in vehicles}
    dates = sorted({e.expense_date for e in expenses})
    rows: List[ExpenseReportRow] = []

    for serial, day in enumerate(dates, start=1):
        row = ExpenseReportRow(
            serial=serial,
            expense_date=day,
            vehicles={v.vehicle_id: CarFuelTotals() for v in vehicles},
        )
        for e in expenses:
            if e.expense_date != day:
                continue
            vehicle = by_id.get(e.vehicle_id) if e.vehicle_id is not None else None

            if vehicle is not None and vehicle.vehicle_type == VehicleType.MOTORCYCLE:
                row.motorcycle_bill += e.amount
            elif e.expense_type == ExpenseType.FUEL:
                if vehicle is not None and vehicle.vehicle_type == VehicleType.CAR:
                    totals = row.vehicles[vehicle.vehicle_id]
                    if e.fuel_type == FuelType.LPG:
                        totals.lpg += e.amount
                    elif e.fuel_type == FuelType.BILL_99:
                        totals.bill99 += e.amount
                    else:
                        totals.petrol += e.amount
            elif e.expense_type == ExpenseType.MAINTENANCE:
                row.maintenance += e.amount
            elif e.expense_type == ExpenseType.TOLL:
                row.toll += e.amount
            elif e.expense_type == ExpenseType.COOKING_GAS:
                row.cooking_gas += e.amount

            row.total += e.amount
        rows.append(row)

    return rows


class ExpenseService:
    def __init__(self, expenses: ExpenseRepository, vehicles: VehicleRepository, blobs: BlobStore):
        self._expenses = expenses
        self._vehicles = vehicles
        self._blobs = blobs

    def list_vehicles(self) -> Sequence[Vehicle]:
        return self._vehicles.list_all()

    def _upload_voucher(self, user_id: int, voucher: VoucherUpload) -> str:
        ext = voucher.filename.rsplit(".", 1)[-1].lower() if "." in voucher.filename else "bin"
        path = f"{VOUCHER_BUCKET}/{user_id}/{uuid.uuid4().hex}.{ext}"
        return self._blobs.upload(path, voucher.data)

    def record_expense(
        self,
        viewer: Viewer,
        *,
        expense_date: Optional[date],
        expense_type: ExpenseType,
        amount,
        vehicle_id: Optional[int] = None,
        fuel_type: Optional[FuelType] = None,
        unit_price=None,
        odometer=None,
        description: str = "",
        voucher: Optional[VoucherUpload] = None,
    ) -> Expense:
        amount = require_positive(amount, "Amount")
        if expense_date is None:
            raise ValidationError("Expense date is required")

        if vehicle_id is not None:
            if not self._vehicles.get_by_id(vehicle_id):
                raise ValidationError("Vehicle does not exist")
        elif expense_type.needs_vehicle and self._vehicles.list_all():
            raise ValidationError("Select a car or motorcycle for this expense")

        quantity = None
        if expense_type == ExpenseType.FUEL:
            fuel_type = fuel_type or FuelType.OCTANE
            quantity = fuel_quantity(amount, optional_float(unit_price, "Unit price"))
        else:
            fuel_type = None

        # PersistenceError from the blob store aborts before anything is saved.
        voucher_url = self._upload_voucher(viewer.user_id, voucher) if voucher else None

        expense_id = self._expenses.create(
            user_id=viewer.user_id,
            vehicle_id=vehicle_id,
            expense_type=expense_type,
            fuel_type=fuel_type,
            amount=amount,
            quantity=quantity,
            odometer=optional_float(odometer, "Odometer"),
            description=(description or "").strip(),
            voucher_url=voucher_url,
            expense_date=expense_date,
        )
        logger.info("User %s recorded %s expense %.2f", viewer.user_id, expense_type.value, amount)

        saved = self._expenses.get_by_id(expense_id)
        if not saved:
            raise PersistenceError("Expense was not found after saving")
        return saved

    def _month_range(self, month: str) -> tuple[date, date]:
        try:
            return parse_month(month)
        except (TypeError, ValueError):
            raise ValidationError("Month must be in YYYY-MM format") from None

    def list_expenses(self, viewer: Viewer, month: str) -> Sequence[Expense]:
        start, end = self._month_range(month)
        # Drivers only see their own entries.
        user_id = viewer.user_id if viewer.role == Role.DRIVER else None
        return self._expenses.list_between(start_date=start, end_date=end, user_id=user_id)

    def monthly_report(self, viewer: Viewer, month: str) -> List[ExpenseReportRow]:
        return build_monthly_report(self.list_expenses(viewer, month), self._vehicles.list_all())
