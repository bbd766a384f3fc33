from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.web import admin_required
from ..core.constants import DEFAULT_NOTIFICATION_LIMIT
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/notifications", methods=["GET"], endpoint="api_admin_notifications")
    @admin_required
    def api_admin_notifications():
        limit = request.args.get("limit", DEFAULT_NOTIFICATION_LIMIT, type=int)
        items = container.notification_service.recent(limit)
        return jsonify(
            {
                "success": True,
                "unread": container.notification_service.unread_count(),
                "items": [n.to_dict() for n in items],
            }
        )

    @app.route("/api/admin/notifications/<int:notification_id>/read", methods=["POST"], endpoint="api_admin_notification_read")
    @admin_required
    def api_admin_notification_read(notification_id: int):
        container.notification_service.mark_read(notification_id)
        return jsonify({"success": True})
