from __future__ import annotations

from flask import Flask, jsonify, request

from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payroll/<int:employee_id>/<int:year>/<int:month>", methods=["GET"], endpoint="api_payroll_preview")
    def api_payroll_preview(employee_id: int, year: int, month: int):
        fresh = request.args.get("fresh", "").lower() in {"1", "true", "yes"}
        snapshot = container.payroll_service.preview(employee_id, year, month, fresh=fresh)
        return jsonify({"success": True, "payroll": snapshot.to_dict()})

    @app.route(
        "/api/payroll/<int:employee_id>/<int:year>/<int:month>/save", methods=["POST"], endpoint="api_payroll_save"
    )
    def api_payroll_save(employee_id: int, year: int, month: int):
        snapshot = container.payroll_service.save(employee_id, year, month)
        return jsonify({"success": True, "payroll": snapshot.to_dict()}), 201

    @app.route(
        "/api/payroll/<int:employee_id>/<int:year>/<int:month>/supersede",
        methods=["POST"],
        endpoint="api_payroll_supersede",
    )
    def api_payroll_supersede(employee_id: int, year: int, month: int):
        data = request.get_json(silent=True) or {}
        try:
            expected_version = int(data["expected_version"])
        except (KeyError, TypeError, ValueError):
            raise ValidationError("expected_version is required")

        snapshot = container.payroll_service.supersede(employee_id, year, month, expected_version=expected_version)
        return jsonify({"success": True, "payroll": snapshot.to_dict()}), 201

    @app.route(
        "/api/payroll/<int:employee_id>/<int:year>/<int:month>/payslip", methods=["GET"], endpoint="api_payslip"
    )
    def api_payslip(employee_id: int, year: int, month: int):
        payslip = container.payroll_service.payslip(employee_id, year, month)
        return jsonify({"success": True, "payslip": payslip.to_dict()})

    @app.route("/api/payroll/summary/<int:year>/<int:month>", methods=["GET"], endpoint="api_payroll_summary")
    def api_payroll_summary(year: int, month: int):
        data = container.payroll_service.monthly_summary(year, month)
        return jsonify({"success": True, "rows": data.rows, "summary": data.summary})
