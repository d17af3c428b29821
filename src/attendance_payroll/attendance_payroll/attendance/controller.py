from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import admin_required, current_user_id, json_body, login_required, to_json
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    attendance = container.attendance_service

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def today():
        status = attendance.get_today_status(current_user_id())
        return jsonify({"success": True, "status": to_json(status)})

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="clock_in")
    @login_required
    def clock_in():
        data = json_body()
        log = attendance.clock_in(current_user_id(), data.get("photo_ref"))
        return jsonify({"success": True, "message": "Clocked in", "log": to_json(log)}), 201

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="clock_out")
    @login_required
    def clock_out():
        data = json_body()
        try:
            log_id = int(data["log_id"])
        except (KeyError, TypeError, ValueError):
            raise ValidationError("log_id is required")

        if attendance.get_log(log_id).user_id != current_user_id():
            raise AuthorizationError("You can only clock out of your own session")

        log = attendance.clock_out(log_id, data.get("photo_ref"))
        return jsonify({"success": True, "message": "Clocked out", "log": to_json(log)})

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    def history():
        limit = request.args.get("limit", type=int) or app.config.get("DEFAULT_HISTORY_LIMIT", 30)
        logs = attendance.get_history(current_user_id(), limit=limit)
        return jsonify({"success": True, "logs": to_json(list(logs))})

    @app.route("/api/admin/attendance", methods=["GET"], endpoint="admin_attendance")
    @admin_required
    def admin_attendance():
        date_s = request.args.get("date")
        work_date = parse_iso_date(date_s) if date_s else None
        rows = attendance.list_logs(work_date=work_date)
        return jsonify(
            {
                "success": True,
                "logs": [dict(to_json(r.log), user_name=r.user_name, user_email=r.user_email) for r in rows],
            }
        )
