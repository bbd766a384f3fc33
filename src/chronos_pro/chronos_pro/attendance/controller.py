from __future__ import annotations

from flask import Flask, jsonify, render_template, session

from ..common.web import json_body, json_error
from ..core.exceptions import ValidationError
from ..container import Container
from .service import next_punch_type


def _coords(data: dict) -> tuple[float, float]:
    try:
        return float(data["latitude"]), float(data["longitude"])
    except (KeyError, TypeError, ValueError):
        raise ValidationError("GPS position is required")


def register(app: Flask, container: Container) -> None:
    @app.route("/", endpoint="kiosk")
    def kiosk():
        return render_template("kiosk.html")

    @app.route("/api/kiosk/employees", methods=["GET"], endpoint="api_kiosk_employees")
    def api_kiosk_employees():
        return jsonify({"success": True, "employees": container.employee_service.list_for_picker()})

    @app.route("/api/kiosk/last/<int:user_id>", methods=["GET"], endpoint="api_kiosk_last")
    def api_kiosk_last(user_id: int):
        """What the next punch of the picked employee will be."""
        container.employee_service.get(user_id)
        last = container.punch_service.last_punch(user_id)
        return jsonify(
            {
                "success": True,
                "last": last.to_dict() if last else None,
                "next": next_punch_type(last).value,
            }
        )

    @app.route("/api/kiosk/geofence", methods=["POST"], endpoint="api_kiosk_geofence")
    def api_kiosk_geofence():
        lat, lng = _coords(json_body())
        result = container.location_service.check(lat, lng)
        return jsonify({"success": True, **result.to_dict()})

    @app.route("/api/kiosk/face", methods=["POST"], endpoint="api_kiosk_face")
    def api_kiosk_face():
        data = json_body()
        lat, lng = _coords(data)
        descriptor = data.get("descriptor")
        if descriptor is None:
            descriptor = container.face_encoder.encode(data.get("image", ""))

        result = container.punch_service.punch_by_face(descriptor, latitude=lat, longitude=lng)
        session["kiosk_last_log_id"] = result.log.log_id
        return jsonify({"success": True, **result.to_dict()})

    @app.route("/api/kiosk/pin", methods=["POST"], endpoint="api_kiosk_pin")
    def api_kiosk_pin():
        data = json_body()
        lat, lng = _coords(data)
        try:
            user_id = int(data.get("user_id"))
        except (TypeError, ValueError):
            raise ValidationError("Select an employee")

        result = container.punch_service.punch_by_pin(user_id, str(data.get("pin", "")), latitude=lat, longitude=lng)
        session["kiosk_last_log_id"] = result.log.log_id
        return jsonify({"success": True, **result.to_dict()})

    @app.route("/api/kiosk/switch/<int:log_id>", methods=["POST"], endpoint="api_kiosk_switch")
    def api_kiosk_switch(log_id: int):
        """Undo button: flip the punch this terminal just registered."""
        if session.get("kiosk_last_log_id") != log_id:
            return json_error("Only the last punch of this terminal can be corrected", 403)

        new_type = container.punch_service.switch_punch(log_id)
        return jsonify({"success": True, "log_id": log_id, "type": new_type.value})
