from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import admin_required, json_body
from ..core.exceptions import ValidationError
from ..container import Container
from .builder import SLOT_LABELS


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/timesheet", methods=["GET"], endpoint="api_admin_timesheet")
    @admin_required
    def api_admin_timesheet():
        today = now_local().date()
        try:
            year = int(request.args.get("year") or today.year)
            month = int(request.args.get("month") or today.month)
            user_id = int(request.args["user_id"]) if request.args.get("user_id") else None
        except ValueError:
            raise ValidationError("year, month and user_id must be numbers")

        rows = container.timesheet_service.month(year, month, user_id=user_id)
        return jsonify(
            {
                "success": True,
                "year": year,
                "month": month,
                "slots": list(SLOT_LABELS),
                "rows": [r.to_dict() for r in rows],
            }
        )

    @app.route("/api/admin/timesheet/slot", methods=["POST"], endpoint="api_admin_timesheet_slot")
    @admin_required
    def api_admin_timesheet_slot():
        data = json_body()
        try:
            user_id = int(data["user_id"])
            slot_index = int(data["slot_index"])
        except (KeyError, TypeError, ValueError):
            raise ValidationError("user_id and slot_index are required")

        log_id = container.timesheet_service.edit_slot(
            user_id=user_id,
            day=parse_iso_date(str(data.get("date", ""))),
            slot_index=slot_index,
            hhmm=str(data.get("time", "")),
            log_id=int(data["log_id"]) if data.get("log_id") else None,
        )
        return jsonify({"success": True, "log_id": log_id})

    @app.route("/api/admin/timesheet/<int:user_id>/<day>", methods=["DELETE"], endpoint="api_admin_timesheet_delete_day")
    @admin_required
    def api_admin_timesheet_delete_day(user_id: int, day: str):
        removed = container.timesheet_service.delete_day(user_id=user_id, day=parse_iso_date(day))
        return jsonify({"success": True, "removed": removed})
