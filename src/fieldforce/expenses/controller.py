from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import current_viewer, json_body, login_required, month_arg
from ..container import Container
from ..core.enums import ExpenseType, FuelType
from ..core.exceptions import ValidationError
from .model import VoucherUpload


def _enum(enum_cls, value, field_name: str):
    if value in (None, ""):
        return None
    try:
        return enum_cls(str(value))
    except ValueError:
        raise ValidationError(f"Invalid {field_name}") from None


def _int_or_none(value, field_name: str):
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field_name}") from None


def register(app: Flask, container: Container) -> None:
    @app.route("/api/expenses", methods=["POST"], endpoint="expense_create")
    @login_required
    def create_expense():
        # Multipart when a voucher image is attached, JSON otherwise.
        data = request.form.to_dict() if request.form else json_body()

        voucher = None
        file = request.files.get("voucher")
        if file and file.filename:
            voucher = VoucherUpload(filename=file.filename, data=file.read())

        raw_date = data.get("date")
        try:
            expense_date = parse_iso_date(raw_date) if raw_date else None
        except ValueError:
            raise ValidationError("Date must be in YYYY-MM-DD format") from None

        expense_type = _enum(ExpenseType, data.get("type"), "expense type")
        if expense_type is None:
            raise ValidationError("Expense type is required")

        expense = container.expense_service.record_expense(
            current_viewer(),
            expense_date=expense_date,
            expense_type=expense_type,
            amount=data.get("amount"),
            vehicle_id=_int_or_none(data.get("vehicle_id"), "vehicle"),
            fuel_type=_enum(FuelType, data.get("fuel_type"), "fuel type"),
            unit_price=data.get("unit_price"),
            odometer=data.get("odometer"),
            description=data.get("description") or "",
            voucher=voucher,
        )
        return jsonify({"success": True, "expense": expense.as_dict()}), 201

    @app.route("/api/expenses", methods=["GET"], endpoint="expense_list")
    @login_required
    def list_expenses():
        month = month_arg(now_local())
        expenses = container.expense_service.list_expenses(current_viewer(), month)
        return jsonify({"success": True, "month": month, "expenses": [e.as_dict() for e in expenses]})

    @app.route("/api/expenses/report", methods=["GET"], endpoint="expense_report")
    @login_required
    def expense_report():
        viewer = current_viewer()
        month = month_arg(now_local())
        rows = container.expense_service.monthly_report(viewer, month)
        vehicles = container.expense_service.list_vehicles()
        return jsonify(
            {
                "success": True,
                "month": month,
                "vehicles": [
                    {"id": v.vehicle_id, "name": v.name, "type": v.vehicle_type.value} for v in vehicles
                ],
                "rows": [r.as_dict() for r in rows],
            }
        )
