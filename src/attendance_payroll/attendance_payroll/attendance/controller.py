from __future__ import annotations

from flask import Flask, jsonify, request

from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _json_body():
        data = request.get_json(silent=True)
        if data is None:
            raise ValidationError("Request body must be JSON")
        return data

    def _json_object(*, required: bool = True) -> dict:
        data = request.get_json(silent=True)
        if data is None and not required:
            return {}
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data

    def _employee_id(data: dict) -> int:
        try:
            return int(data["employee_id"])
        except (KeyError, TypeError, ValueError):
            raise ValidationError("employee_id is required")

    def _leave_master_id(data: dict):
        value = data.get("leave_master_id")
        if value in (None, ""):
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValidationError("leave_master_id must be an integer")

    def _record_dict(record) -> dict:
        return {
            "attendance_id": record.attendance_id,
            "employee_id": record.employee_id,
            "work_date": record.work_date.strftime("%Y-%m-%d"),
            "status": record.status.value,
            "punch_in": record.punch_in.strftime("%H:%M:%S") if record.punch_in else None,
            "punch_out": record.punch_out.strftime("%H:%M:%S") if record.punch_out else None,
            "verification": record.verification.value,
            "leave_master_id": record.leave_master_id,
            "admin_note": record.admin_note,
        }

    @app.route("/api/attendance/punch-in", methods=["POST"], endpoint="api_punch_in")
    def api_punch_in():
        attendance_id = container.attendance_service.punch_in(_employee_id(_json_object()))
        return jsonify({"success": True, "attendance_id": attendance_id}), 201

    @app.route("/api/attendance/punch-out", methods=["POST"], endpoint="api_punch_out")
    def api_punch_out():
        container.attendance_service.punch_out(_employee_id(_json_object()))
        return jsonify({"success": True})

    @app.route("/api/attendance/<int:attendance_id>/status", methods=["PUT"], endpoint="api_set_status")
    def api_set_status(attendance_id: int):
        data = _json_object()
        record = container.attendance_service.set_status(
            attendance_id,
            status=data.get("status"),
            leave_master_id=_leave_master_id(data),
            admin_note=data.get("admin_note"),
        )
        return jsonify({"success": True, "record": _record_dict(record)})

    @app.route("/api/attendance/<int:attendance_id>/verify", methods=["POST"], endpoint="api_verify")
    def api_verify(attendance_id: int):
        data = _json_object(required=False)
        record = container.attendance_service.verify(attendance_id, admin_note=data.get("admin_note"))
        return jsonify({"success": True, "record": _record_dict(record)})

    @app.route("/api/attendance/import", methods=["POST"], endpoint="api_import")
    def api_import():
        data = _json_body()
        rows = data.get("records") if isinstance(data, dict) else data
        if not isinstance(rows, list):
            raise ValidationError("Expected a list of attendance records")
        ids = container.attendance_service.import_records(rows)
        return jsonify({"success": True, "imported": len(ids), "attendance_ids": ids})

    @app.route("/api/attendance/holidays/<int:year>/<int:month>", methods=["POST"], endpoint="api_apply_holidays")
    def api_apply_holidays(year: int, month: int):
        created = container.attendance_service.apply_fixed_holidays(year, month)
        return jsonify({"success": True, "created": created})

    @app.route("/api/attendance/<int:employee_id>/<int:year>/<int:month>", methods=["GET"], endpoint="api_calendar")
    def api_calendar(employee_id: int, year: int, month: int):
        days = container.attendance_service.month_calendar(employee_id, year, month)
        return jsonify({"success": True, "employee_id": employee_id, "days": [d.to_dict() for d in days]})
