from __future__ import annotations

from typing import Optional

from flask import Flask, g, jsonify

from ..common.http import int_arg, to_json_value
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..users.identity import login_required
from .model import AttendanceRecord


def record_to_dict(record: Optional[AttendanceRecord]) -> Optional[dict]:
    if record is None:
        return None
    return {
        "attendance_id": record.attendance_id,
        "user_id": record.user_id,
        "work_date": to_json_value(record.work_date),
        "check_in_time": to_json_value(record.check_in_time),
        "check_out_time": to_json_value(record.check_out_time),
        "check_in_status": to_json_value(record.check_in_status),
        "check_out_status": to_json_value(record.check_out_status),
        "total_hours": to_json_value(record.total_hours),
        "overtime_hours": to_json_value(record.overtime_hours),
    }


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service
    authenticated = login_required(container.identity)

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @authenticated
    def check_in():
        record = service.check_in(g.current_user.user_id)
        return jsonify({
            "success": True,
            "message": f"Checked in ({record.check_in_status.value})",
            "record": record_to_dict(record),
        }), 201

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @authenticated
    def check_out():
        record = service.check_out(g.current_user.user_id)
        return jsonify({
            "success": True,
            "message": f"Checked out ({record.check_out_status.value})",
            "record": record_to_dict(record),
        })

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @authenticated
    def today():
        record = service.get_today_record(g.current_user.user_id)
        return jsonify({"success": True, "record": record_to_dict(record)})

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @authenticated
    def history():
        limit = int_arg("limit", DEFAULT_HISTORY_LIMIT, high=366)
        records = service.get_history(g.current_user.user_id, limit=limit)
        return jsonify({"success": True, "records": [record_to_dict(r) for r in records]})
