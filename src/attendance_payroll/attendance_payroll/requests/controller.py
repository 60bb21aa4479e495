from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _json_object() -> dict:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data

    def _int_field(data: dict, key: str) -> int:
        try:
            return int(data[key])
        except (KeyError, TypeError, ValueError):
            raise ValidationError(f"{key} is required")

    def _date_field(data: dict, key: str):
        try:
            return parse_iso_date(str(data[key]))
        except (KeyError, ValueError):
            raise ValidationError(f"{key} must be a YYYY-MM-DD date")

    @app.route("/api/leave-requests", methods=["POST"], endpoint="api_leave_request_submit")
    def api_leave_request_submit():
        data = _json_object()
        request_id = container.request_service.submit(
            employee_id=_int_field(data, "employee_id"),
            leave_master_id=_int_field(data, "leave_master_id"),
            start_date=_date_field(data, "from_date"),
            end_date=_date_field(data, "to_date"),
            reason=str(data.get("reason") or ""),
        )
        return jsonify({"success": True, "request_id": request_id}), 201

    @app.route("/api/leave-requests", methods=["GET"], endpoint="api_leave_request_list")
    def api_leave_request_list():
        employee_id = request.args.get("employee_id", type=int)
        items = container.request_service.list_requests(status=request.args.get("status"), employee_id=employee_id)
        return jsonify({"success": True, "requests": [r.to_dict() for r in items]})

    @app.route(
        "/api/leave-requests/<int:request_id>/review", methods=["POST"], endpoint="api_leave_request_review"
    )
    def api_leave_request_review(request_id: int):
        data = _json_object()
        leave_request = container.request_service.review(
            request_id,
            status=data.get("status"),
            admin_comment=data.get("admin_comment"),
        )
        return jsonify({"success": True, "request": leave_request.to_dict()})
