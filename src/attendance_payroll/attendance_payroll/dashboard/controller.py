from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.web import admin_required, to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/dashboard", methods=["GET"], endpoint="admin_dashboard")
    @admin_required
    def admin_dashboard():
        date_s = request.args.get("date")
        stats = container.dashboard_service.get_stats(parse_iso_date(date_s) if date_s else None)
        return jsonify({"success": True, "stats": to_json(stats)})
