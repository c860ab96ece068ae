from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local
from ..common.web import current_user, login_required, to_json
from ..core.exceptions import ValidationError
from ..container import Container


def _int_arg(name: str, default: int | None = None) -> int | None:
    raw = request.args.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def register(app: Flask, container: Container) -> None:
    svc = container.attendance_service

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    def check_in():
        record = svc.check_in(current_user().user_id)
        return jsonify({"message": "Checked in successfully", "attendance": to_json(record)})

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    def check_out():
        record = svc.check_out(current_user().user_id)
        return jsonify({"message": "Checked out successfully", "attendance": to_json(record)})

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def today():
        return jsonify({"attendance": to_json(svc.get_today_record(current_user().user_id))})

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @login_required
    def list_attendance():
        now = now_local()
        user = current_user()
        rows = svc.list_month(
            current_role=user.role,
            current_user_id=user.user_id,
            year=_int_arg("year", now.year),
            month=_int_arg("month", now.month),
            employee_id=_int_arg("employeeId"),
        )
        return jsonify({"attendances": to_json(list(rows))})

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    @login_required
    def stats():
        now = now_local()
        result = svc.monthly_stats(
            current_user().user_id,
            year=_int_arg("year", now.year),
            month=_int_arg("month", now.month),
        )
        return jsonify({"stats": to_json(result)})
