from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import admin_required, json_body, to_json
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    payroll = container.payroll_service

    @app.route("/api/admin/payroll", methods=["GET"], endpoint="admin_payroll")
    @admin_required
    def admin_payroll():
        month = request.args.get("month", "")
        rows = payroll.list_for_month(month)
        return jsonify(
            {
                "success": True,
                "month": month,
                "records": [
                    dict(to_json(r.record), employee_name=r.employee_name, employee_email=r.employee_email)
                    for r in rows
                ],
                "summary": to_json(payroll.summarize(r.record for r in rows)),
            }
        )

    @app.route("/api/admin/payroll/generate", methods=["POST"], endpoint="generate_payroll")
    @admin_required
    def generate_payroll():
        data = json_body()
        month = data.get("month")
        if not isinstance(month, str):
            raise ValidationError("month is required (YYYY-MM)")
        records = payroll.generate_payroll(month)
        return jsonify(
            {
                "success": True,
                "message": f"Payroll generated for {month}",
                "records": to_json(records),
                "summary": to_json(payroll.summarize(records)),
            }
        )

    @app.route("/api/admin/payroll/<int:record_id>/paid", methods=["POST"], endpoint="mark_payroll_paid")
    @admin_required
    def mark_paid(record_id: int):
        record = payroll.mark_as_paid(record_id)
        return jsonify({"success": True, "record": to_json(record)})
