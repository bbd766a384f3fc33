from __future__ import annotations

from flask import Flask, jsonify

from ..common.web import admin_required, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/locations", methods=["GET"], endpoint="api_admin_locations")
    @admin_required
    def api_admin_locations():
        default = container.location_service.default_location()
        return jsonify(
            {
                "success": True,
                "locations": [l.to_dict() for l in container.location_service.list_all()],
                "default_id": default.location_id if default else None,
            }
        )

    @app.route("/api/admin/locations", methods=["POST"], endpoint="api_admin_create_location")
    @admin_required
    def api_admin_create_location():
        data = json_body()
        location_id = container.location_service.save(
            name=data.get("name", ""),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            radius_meters=data.get("radius_meters", 100),
            is_default=bool(data.get("is_default", False)),
        )
        return jsonify({"success": True, "id": location_id}), 201

    @app.route("/api/admin/locations/<int:location_id>", methods=["PUT"], endpoint="api_admin_update_location")
    @admin_required
    def api_admin_update_location(location_id: int):
        data = json_body()
        container.location_service.save(
            location_id=location_id,
            name=data.get("name", ""),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
            radius_meters=data.get("radius_meters", 100),
            is_default=bool(data.get("is_default", False)),
        )
        return jsonify({"success": True, "id": location_id})

    @app.route("/api/admin/locations/<int:location_id>/default", methods=["POST"], endpoint="api_admin_default_location")
    @admin_required
    def api_admin_default_location(location_id: int):
        container.location_service.set_default(location_id)
        return jsonify({"success": True})

    @app.route("/api/admin/locations/<int:location_id>", methods=["DELETE"], endpoint="api_admin_delete_location")
    @admin_required
    def api_admin_delete_location(location_id: int):
        container.location_service.delete(location_id)
        return jsonify({"success": True})
