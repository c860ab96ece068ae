from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import current_user, login_required, to_json
from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import ValidationError
from ..container import Container


def _leave_type(value) -> LeaveType:
    try:
        return LeaveType(str(value or "").upper())
    except ValueError:
        raise ValidationError("Invalid leave type")


def _optional_int(value, field_name: str) -> int | None:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def register(app: Flask, container: Container) -> None:
    svc = container.leave_service

    @app.route("/api/leaves", methods=["POST"], endpoint="leave_request")
    @login_required
    def request_leave():
        body = request.get_json(silent=True) or {}
        leave = svc.request_leave(
            user_id=current_user().user_id,
            leave_type=_leave_type(body.get("leaveType")),
            start_date=parse_iso_date(body.get("startDate")),
            end_date=parse_iso_date(body.get("endDate")),
            remarks=body.get("remarks"),
        )
        return jsonify({"message": "Leave request submitted successfully", "leave": to_json(leave)}), 201

    @app.route("/api/leaves", methods=["GET"], endpoint="leave_list")
    @login_required
    def list_leaves():
        raw_status = request.args.get("status")
        try:
            status = LeaveStatus(raw_status) if raw_status else None
        except ValueError:
            raise ValidationError("Invalid status")

        user = current_user()
        leaves = svc.list_leaves(
            current_role=user.role,
            current_user_id=user.user_id,
            employee_id=_optional_int(request.args.get("employeeId"), "employeeId"),
            status=status,
        )
        return jsonify({"leaves": to_json(list(leaves))})

    @app.route("/api/leaves/<int:leave_id>/approve", methods=["PUT"], endpoint="leave_approve")
    @login_required
    def approve(leave_id: int):
        user = current_user()
        result = svc.approve_leave(current_role=user.role, approver_id=user.user_id, leave_id=leave_id)
        return jsonify(
            {
                "message": "Leave approved successfully",
                "leave": to_json(result.leave),
                "days": result.days,
                "overwrittenAttendance": to_json(result.overwritten),
            }
        )

    @app.route("/api/leaves/<int:leave_id>/reject", methods=["PUT"], endpoint="leave_reject")
    @login_required
    def reject(leave_id: int):
        user = current_user()
        leave = svc.reject_leave(current_role=user.role, approver_id=user.user_id, leave_id=leave_id)
        return jsonify({"message": "Leave rejected successfully", "leave": to_json(leave)})

    @app.route("/api/leaves/allocations", methods=["GET"], endpoint="leave_allocations")
    @login_required
    def allocations():
        user = current_user()
        rows = svc.get_allocations(
            current_role=user.role,
            current_user_id=user.user_id,
            employee_id=_optional_int(request.args.get("employeeId"), "employeeId"),
            year=_optional_int(request.args.get("year"), "year"),
        )
        return jsonify({"allocations": to_json(list(rows))})

    @app.route("/api/leaves/allocations", methods=["POST"], endpoint="leave_allocation_create")
    @login_required
    def create_allocation():
        body = request.get_json(silent=True) or {}
        employee_id = _optional_int(body.get("employeeId"), "employeeId")
        allocated_days = _optional_int(body.get("allocatedDays"), "allocatedDays")
        if employee_id is None or allocated_days is None:
            raise ValidationError("employeeId and allocatedDays are required")

        allocation = svc.create_allocation(
            current_role=current_user().role,
            employee_id=employee_id,
            leave_type=_leave_type(body.get("leaveType")),
            allocated_days=allocated_days,
            year=_optional_int(body.get("year"), "year"),
        )
        return jsonify({"message": "Leave allocation created successfully", "allocation": to_json(allocation)}), 201
