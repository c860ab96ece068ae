from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.web import current_user, login_required, to_json
from ..core.exceptions import ValidationError
from ..container import Container
from .model import SalaryComponents


def _components_json(c: SalaryComponents) -> dict:
    data = to_json(c)
    data["earnings_total"] = c.earnings_total
    data["net_pay"] = c.net_pay
    return data


def _monthly_wage_from_body():
    body = request.get_json(silent=True) or {}
    wage = body.get("monthlyWage")
    if wage is None or isinstance(wage, bool):
        raise ValidationError("Monthly wage must be greater than 0")
    return wage


def register(app: Flask, container: Container) -> None:
    svc = container.payroll_service

    @app.route("/api/salary/calculate", methods=["POST"], endpoint="salary_calculate")
    @login_required
    def calculate():
        components = svc.calculate(current_role=current_user().role, monthly_wage=_monthly_wage_from_body())
        return jsonify({"components": _components_json(components)})

    @app.route("/api/salary/<int:employee_id>", methods=["GET"], endpoint="salary_get")
    @login_required
    def get_salary(employee_id: int):
        user = current_user()
        info = svc.get_salary_info(current_role=user.role, current_user_id=user.user_id, employee_id=employee_id)
        return jsonify({"salaryInfo": {"employee_id": info.employee_id, **_components_json(info.components)}})

    @app.route("/api/salary/<int:employee_id>", methods=["PUT"], endpoint="salary_update")
    @login_required
    def update_salary(employee_id: int):
        info = svc.update_salary_info(
            current_role=current_user().role,
            employee_id=employee_id,
            monthly_wage=_monthly_wage_from_body(),
        )
        return jsonify(
            {
                "message": "Salary information updated successfully",
                "salaryInfo": {"employee_id": info.employee_id, **_components_json(info.components)},
            }
        )

    @app.route("/api/salary/<int:employee_id>/slip", methods=["GET"], endpoint="salary_slip")
    @login_required
    def salary_slip(employee_id: int):
        now = now_local()
        try:
            year = int(request.args.get("year") or now.year)
            month = int(request.args.get("month") or now.month)
        except ValueError:
            raise ValidationError("year and month must be integers")

        user = current_user()
        slip = svc.build_salary_slip(
            current_role=user.role,
            current_user_id=user.user_id,
            employee_id=employee_id,
            year=year,
            month=month,
        )
        return jsonify(
            {
                "slip": {
                    "employee_id": slip.employee_id,
                    "year": slip.year,
                    "month": slip.month,
                    "payable_days": slip.payable.payable_days,
                    "total_days_in_month": slip.payable.total_days_in_month,
                    "components": _components_json(slip.components),
                }
            }
        )
