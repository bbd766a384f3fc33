from __future__ import annotations

from datetime import timedelta

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import admin_required
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/export.<fmt>", methods=["GET"], endpoint="api_admin_export")
    @admin_required
    def api_admin_export(fmt: str):
        today = now_local().date()
        start = parse_iso_date(request.args["start"]) if request.args.get("start") else today - timedelta(days=30)
        end = parse_iso_date(request.args["end"]) if request.args.get("end") else today
        try:
            user_id = int(request.args["user_id"]) if request.args.get("user_id") else None
        except ValueError:
            raise ValidationError("user_id must be a number")

        export = container.report_service.export(
            fmt,
            start=start,
            end=end,
            user_id=user_id,
            title=request.args.get("title") or "Punch report",
        )
        return app.response_class(
            export.content,
            mimetype=export.mimetype,
            headers={"Content-Disposition": f"attachment; filename={export.filename}"},
        )
