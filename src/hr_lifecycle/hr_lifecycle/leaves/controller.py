from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import now_in
from ..common.http import date_field, int_arg, json_body, to_json_value
from ..container import Container
from ..core.constants import DEFAULT_LIST_LIMIT
from ..users.identity import hr_admin_required, login_required
from .catalog import get_leave_type
from .model import LeaveBalance, LeaveRequest


def request_to_dict(leave: LeaveRequest) -> dict:
    return {
        "request_id": leave.request_id,
        "user_id": leave.user_id,
        "leave_type_id": leave.leave_type_id,
        "leave_type_name": get_leave_type(leave.leave_type_id).name,
        "start_date": to_json_value(leave.start_date),
        "end_date": to_json_value(leave.end_date),
        "date_range": leave.date_range,
        "day_type": to_json_value(leave.day_type),
        "total_days": to_json_value(leave.total_days),
        "reason": leave.reason,
        "status": to_json_value(leave.status),
        "created_at": to_json_value(leave.created_at),
        "approved_by": leave.approved_by,
        "approved_at": to_json_value(leave.approved_at),
        "rejection_reason": leave.rejection_reason,
    }


def balance_to_dict(balance: LeaveBalance) -> dict:
    return {
        "leave_type_id": balance.leave_type_id,
        "leave_type_name": get_leave_type(balance.leave_type_id).name,
        "year": balance.year,
        "allocated": to_json_value(balance.allocated),
        "used": to_json_value(balance.used),
        "balance": to_json_value(balance.balance),
    }


def register(app: Flask, container: Container) -> None:
    service = container.leave_request_service
    ledger = container.leave_ledger
    authenticated = login_required(container.identity)
    hr_only = hr_admin_required(container.identity)

    @app.route("/api/leaves", methods=["POST"], endpoint="leave_submit")
    @authenticated
    def submit():
        data = json_body()
        leave = service.submit(
            g.current_user.user_id,
            str(data.get("leave_type_id") or ""),
            date_field(data, "start_date"),
            date_field(data, "end_date"),
            str(data.get("day_type") or "full"),
            str(data.get("reason") or ""),
        )
        return jsonify({"success": True, "message": "Leave request submitted", "request": request_to_dict(leave)}), 201

    @app.route("/api/leaves/<int:request_id>/cancel", methods=["POST"], endpoint="leave_cancel")
    @authenticated
    def cancel(request_id: int):
        leave = service.cancel(request_id, g.current_user.user_id)
        return jsonify({"success": True, "message": "Leave request cancelled", "request": request_to_dict(leave)})

    @app.route("/api/leaves/mine", methods=["GET"], endpoint="leave_mine")
    @authenticated
    def mine():
        limit = int_arg("limit", DEFAULT_LIST_LIMIT)
        leaves = service.list_my_requests(g.current_user.user_id, limit=limit)
        return jsonify({"success": True, "requests": [request_to_dict(x) for x in leaves]})

    @app.route("/api/leaves/balances", methods=["GET"], endpoint="leave_balances")
    @authenticated
    def balances():
        year = int_arg("year", now_in(container.tz).year, low=2000, high=9999)
        rows = ledger.list_balances(g.current_user.user_id, year)
        return jsonify({"success": True, "year": year, "balances": [balance_to_dict(b) for b in rows]})

    @app.route("/api/hr/leaves/pending", methods=["GET"], endpoint="hr_leave_pending")
    @hr_only
    def pending():
        limit = int_arg("limit", DEFAULT_LIST_LIMIT)
        leaves = service.list_pending(limit=limit)
        return jsonify({"success": True, "requests": [request_to_dict(x) for x in leaves]})

    @app.route("/api/hr/leaves/<int:request_id>/approve", methods=["POST"], endpoint="hr_leave_approve")
    @hr_only
    def approve(request_id: int):
        leave = service.approve(request_id, g.current_user.user_id)
        return jsonify({"success": True, "message": "Leave request approved", "request": request_to_dict(leave)})

    @app.route("/api/hr/leaves/<int:request_id>/reject", methods=["POST"], endpoint="hr_leave_reject")
    @hr_only
    def reject(request_id: int):
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            data = {}
        leave = service.reject(request_id, g.current_user.user_id, str(data.get("reason") or ""))
        return jsonify({"success": True, "message": "Leave request rejected", "request": request_to_dict(leave)})
