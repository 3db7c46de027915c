from datetime import date

import pytest

from fieldforce.core.enums import ExpenseType, FuelType, Role
from fieldforce.core.exceptions import PersistenceError, ValidationError
from fieldforce.expenses.model import VoucherUpload
from fieldforce.expenses.service import ExpenseService, fuel_quantity
from fieldforce.users.model import Viewer

DRIVER = Viewer(5, Role.DRIVER, 1)
ADMIN = Viewer(1, Role.SUPER_ADMIN, None)


@pytest.fixture
def service(repos):
    return ExpenseService(repos.expenses, repos.vehicles, repos.blobs)


def test_fuel_quantity_rounds_to_two_decimals():
    assert fuel_quantity(1000, 123) == 8.13
    assert fuel_quantity(1000, None) is None
    assert fuel_quantity(1000, 0) is None


def test_record_fuel_expense_with_voucher(service, repos):
    expense = service.record_expense(
        DRIVER,
        expense_date=date(2026, 3, 2),
        expense_type=ExpenseType.FUEL,
        amount="1500",
        vehicle_id=10,
        fuel_type=FuelType.LPG,
        unit_price="60",
        voucher=VoucherUpload(filename="receipt.JPG", data=b"img"),
    )

    assert expense.amount == 1500.0
    assert expense.quantity == 25.0
    assert expense.fuel_type == FuelType.LPG
    assert expense.voucher_url.startswith("https://blobs.test/expense-vouchers/5/")
    assert expense.voucher_url.endswith(".jpg")
    assert list(repos.blobs.blobs.values()) == [b"img"]


def test_non_fuel_expense_drops_fuel_type(service):
    expense = service.record_expense(
        ADMIN,
        expense_date=date(2026, 3, 2),
        expense_type=ExpenseType.COOKING_GAS,
        amount=900,
        fuel_type=FuelType.LPG,
    )
    assert expense.fuel_type is None
    assert expense.quantity is None


@pytest.mark.parametrize("amount", [0, -5, "", None, "abc"])
def test_amount_must_be_positive(service, amount):
    with pytest.raises(ValidationError):
        service.record_expense(DRIVER, expense_date=date(2026, 3, 2), expense_type=ExpenseType.OTHER, amount=amount)


def test_vehicle_required_for_fuel_when_vehicles_exist(service):
    with pytest.raises(ValidationError):
        service.record_expense(DRIVER, expense_date=date(2026, 3, 2), expense_type=ExpenseType.TOLL, amount=100)


def test_unknown_vehicle_rejected(service):
    with pytest.raises(ValidationError):
        service.record_expense(
            DRIVER, expense_date=date(2026, 3, 2), expense_type=ExpenseType.TOLL, amount=100, vehicle_id=99
        )


def test_upload_failure_saves_nothing(repos):
    repos.blobs.fail = True
    service = ExpenseService(repos.expenses, repos.vehicles, repos.blobs)
    with pytest.raises(PersistenceError):
        service.record_expense(
            DRIVER,
            expense_date=date(2026, 3, 2),
            expense_type=ExpenseType.OTHER,
            amount=10,
            voucher=VoucherUpload(filename="a.png", data=b"x"),
        )
    assert repos.expenses.items == {}


def test_driver_sees_only_own_expenses(service):
    service.record_expense(DRIVER, expense_date=date(2026, 3, 2), expense_type=ExpenseType.OTHER, amount=10)
    service.record_expense(ADMIN, expense_date=date(2026, 3, 3), expense_type=ExpenseType.OTHER, amount=20)
    service.record_expense(ADMIN, expense_date=date(2026, 4, 1), expense_type=ExpenseType.OTHER, amount=30)

    assert [e.amount for e in service.list_expenses(DRIVER, "2026-03")] == [10.0]
    assert [e.amount for e in service.list_expenses(ADMIN, "2026-03")] == [20.0, 10.0]


def test_bad_month_is_validation_error(service):
    with pytest.raises(ValidationError):
        service.list_expenses(ADMIN, "March")


def test_monthly_report_aggregates_per_day(service):
    day1, day2 = date(2026, 3, 1), date(2026, 3, 2)
    record = service.record_expense
    record(ADMIN, expense_date=day1, expense_type=ExpenseType.FUEL, amount=100, vehicle_id=10, fuel_type=FuelType.LPG)
    record(ADMIN, expense_date=day1, expense_type=ExpenseType.FUEL, amount=200, vehicle_id=10, fuel_type=FuelType.OCTANE)
    record(ADMIN, expense_date=day1, expense_type=ExpenseType.FUEL, amount=50, vehicle_id=10, fuel_type=FuelType.BILL_99)
    record(ADMIN, expense_date=day1, expense_type=ExpenseType.FUEL, amount=70, vehicle_id=11, fuel_type=FuelType.PETROL)
    record(ADMIN, expense_date=day2, expense_type=ExpenseType.TOLL, amount=30, vehicle_id=10)
    record(ADMIN, expense_date=day2, expense_type=ExpenseType.MAINTENANCE, amount=400, vehicle_id=11)
    record(ADMIN, expense_date=day2, expense_type=ExpenseType.COOKING_GAS, amount=15)

    rows = service.monthly_report(ADMIN, "2026-03")

    assert [r.serial for r in rows] == [1, 2]
    first, second = rows
    assert first.expense_date == day1
    assert (first.vehicles[10].lpg, first.vehicles[10].petrol, first.vehicles[10].bill99) == (100, 200, 50)
    assert first.motorcycle_bill == 70
    assert first.total == 420

    assert second.toll == 30
    assert second.motorcycle_bill == 400
    assert second.maintenance == 0
    assert second.cooking_gas == 15
    assert second.total == 445
