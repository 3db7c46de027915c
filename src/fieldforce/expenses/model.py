from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Optional

from ..core.enums import ExpenseType, FuelType, VehicleType


@dataclass(frozen=True)
class Vehicle:
    vehicle_id: int
    name: str
    vehicle_type: VehicleType


@dataclass(frozen=True)
class Expense:
    """Domain entity: one vehicle/running cost entry."""

    expense_id: int
    user_id: int
    vehicle_id: Optional[int]
    expense_type: ExpenseType
    fuel_type: Optional[FuelType]
    amount: float
    quantity: Optional[float]
    odometer: Optional[float]
    description: str
    voucher_url: Optional[str]
    expense_date: date

    def as_dict(self) -> dict:
        return {
            "id": self.expense_id,
            "user_id": self.user_id,
            "vehicle_id": self.vehicle_id,
            "type": self.expense_type.value,
            "fuel_type": self.fuel_type.value if self.fuel_type else None,
            "amount": self.amount,
            "quantity": self.quantity,
            "odometer": self.odometer,
            "description": self.description,
            "voucher_url": self.voucher_url,
            "date": self.expense_date.strftime("%Y-%m-%d"),
        }


@dataclass(frozen=True)
class VoucherUpload:
    filename: str
    data: bytes


@dataclass
class CarFuelTotals:
    lpg: float = 0.0
    petrol: float = 0.0
    bill99: float = 0.0


@dataclass
class ExpenseReportRow:
    """One day of the monthly expense sheet."""

    serial: int
    expense_date: date
    vehicles: Dict[int, CarFuelTotals] = field(default_factory=dict)
    motorcycle_bill: float = 0.0
    toll: float = 0.0
    maintenance: float = 0.0
    cooking_gas: float = 0.0
    total: float = 0.0

    def as_dict(self) -> dict:
        return {
            "serial": self.serial,
            "date": self.expense_date.strftime("%Y-%m-%d"),
            "vehicles": {
                str(vid): {"lpg": t.lpg, "petrol": t.petrol, "bill99": t.bill99}
                for vid, t in self.vehicles.items()
            },
            "motorcycle_bill": self.motorcycle_bill,
            "toll": self.toll,
            "maintenance": self.maintenance,
            "cooking_gas": self.cooking_gas,
            "total": self.total,
        }
