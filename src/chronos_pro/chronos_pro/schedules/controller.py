from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required, json_body
from ..core.exceptions import ValidationError
from ..container import Container
from .service import MONDAY, copy_day


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/employees/<int:user_id>/schedule", methods=["GET"], endpoint="api_admin_schedule")
    @admin_required
    def api_admin_schedule(user_id: int):
        container.employee_service.get(user_id)
        return jsonify({"success": True, "days": container.schedule_service.get_matrix(user_id)})

    @app.route("/api/admin/employees/<int:user_id>/schedule", methods=["PUT"], endpoint="api_admin_save_schedule")
    @admin_required
    def api_admin_save_schedule(user_id: int):
        data = json_body()
        days = data.get("days")
        if not isinstance(days, list):
            raise ValidationError("days must be a list")
        container.employee_service.get(user_id)
        saved = container.schedule_service.save_matrix(user_id, days)
        return jsonify({"success": True, "saved": saved})

    @app.route("/api/admin/schedule/copy-day", methods=["POST"], endpoint="api_admin_copy_day")
    @admin_required
    def api_admin_copy_day():
        """Copy one day (Monday by default) onto other days of an unsaved matrix."""
        data = json_body()
        matrix = data.get("days")
        targets = data.get("targets")
        if not isinstance(matrix, list) or not isinstance(targets, list):
            raise ValidationError("days and targets must be lists")
        rows = copy_day(matrix, targets, source_day=int(data.get("source_day", MONDAY)))
        return jsonify({"success": True, "days": rows})
