from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import current_user, login_required, to_json
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    svc = container.employee_service

    @app.route("/api/employees", methods=["GET"], endpoint="employee_list")
    @login_required
    def list_employees():
        user = current_user()
        employees = svc.list_employees(current_role=user.role, current_user_id=user.user_id)
        return jsonify({"employees": to_json(list(employees))})

    @app.route("/api/employees/<int:employee_id>", methods=["GET"], endpoint="employee_get")
    @login_required
    def get_employee(employee_id: int):
        user = current_user()
        employee = svc.get_employee(current_role=user.role, current_user_id=user.user_id, employee_id=employee_id)
        return jsonify({"employee": to_json(employee)})

    @app.route("/api/employees/<int:employee_id>", methods=["PUT"], endpoint="employee_update")
    @login_required
    def update_employee(employee_id: int):
        body = request.get_json(silent=True) or {}
        working_days = body.get("workingDays")
        if working_days is not None and not isinstance(working_days, list):
            raise ValidationError("workingDays must be a list of weekday numbers")

        employee = svc.update_employee(
            current_role=current_user().role,
            employee_id=employee_id,
            first_name=body.get("firstName"),
            last_name=body.get("lastName"),
            break_time_hours=body.get("breakTimeHours"),
            working_days=working_days,
        )
        return jsonify({"message": "Employee updated successfully", "employee": to_json(employee)})
