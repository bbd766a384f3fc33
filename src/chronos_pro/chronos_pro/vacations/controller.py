from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import now_local, parse_iso_date
from ..common.web import admin_required, json_body, portal_required
from ..core.enums import VacationIntensity, VacationStatus, VacationType
from ..core.exceptions import ValidationError
from ..container import Container


def _enum(cls, value, default):
    try:
        return cls(value or default)
    except ValueError:
        raise ValidationError(f"Invalid {cls.__name__}: {value!r}")


def register(app: Flask, container: Container) -> None:
    # ===== EMPLOYEE PORTAL (PIN / face session) =====

    @app.route("/api/portal/login", methods=["POST"], endpoint="api_portal_login")
    def api_portal_login():
        data = json_body()
        try:
            user_id = int(data.get("user_id"))
        except (TypeError, ValueError):
            raise ValidationError("Select an employee")

        if data.get("descriptor") is not None:
            profile = container.auth_service.login_with_face(user_id, data["descriptor"])
        else:
            profile = container.auth_service.login_with_pin(user_id, str(data.get("pin", "")))

        session["portal_user_id"] = profile.user_id
        return jsonify({"success": True, "employee": profile.public_dict()})

    @app.route("/api/portal/logout", methods=["POST"], endpoint="api_portal_logout")
    def api_portal_logout():
        session.pop("portal_user_id", None)
        return jsonify({"success": True})

    @app.route("/api/portal/<int:user_id>", methods=["GET"], endpoint="api_portal_data")
    @portal_required
    def api_portal_data(user_id: int):
        profile = container.employee_service.get(user_id)
        data = container.vacation_service.portal_data(user_id)
        return jsonify({"success": True, "employee": profile.public_dict(), **data})

    @app.route("/api/portal/<int:user_id>/vacations", methods=["POST"], endpoint="api_portal_request_vacation")
    @portal_required
    def api_portal_request_vacation(user_id: int):
        data = json_body()
        kwargs = dict(
            type=_enum(VacationType, data.get("type"), VacationType.VACATION.value),
            intensity=_enum(VacationIntensity, data.get("intensity"), VacationIntensity.FULL.value),
            start_time=data.get("start_time"),
            end_time=data.get("end_time"),
        )

        if data.get("dates"):
            days = [parse_iso_date(str(d)) for d in data["dates"]]
            ids = container.vacation_service.request_days(user_id, days, **kwargs)
        else:
            start = parse_iso_date(str(data.get("start_date", "")))
            end = parse_iso_date(str(data.get("end_date") or data.get("start_date", "")))
            ids = [container.vacation_service.request_vacation(user_id, start=start, end=end, **kwargs)]

        return jsonify({"success": True, "ids": ids}), 201

    @app.route(
        "/api/portal/<int:user_id>/vacations/<int:request_id>/cancel",
        methods=["POST"],
        endpoint="api_portal_cancel_vacation",
    )
    @portal_required
    def api_portal_cancel_vacation(user_id: int, request_id: int):
        container.vacation_service.cancel(user_id, request_id)
        return jsonify({"success": True})

    @app.route("/api/portal/<int:user_id>/heartbeat", methods=["POST"], endpoint="api_portal_heartbeat")
    @portal_required
    def api_portal_heartbeat(user_id: int):
        data = json_body()
        try:
            location_id = int(data.get("location_id"))
        except (TypeError, ValueError):
            raise ValidationError("location_id is required")
        container.location_service.get(location_id)
        container.employee_service.heartbeat(user_id, location_id)
        return jsonify({"success": True})

    # ===== ADMIN =====

    @app.route("/api/admin/vacations", methods=["GET"], endpoint="api_admin_vacations")
    @admin_required
    def api_admin_vacations():
        status = request.args.get("status")
        rows = container.vacation_service.admin_list()
        if status:
            rows = [r for r in rows if r.status.value == status]
        return jsonify({"success": True, "requests": [r.to_dict() for r in rows]})

    @app.route("/api/admin/vacations/<int:request_id>/validate", methods=["POST"], endpoint="api_admin_validate_vacation")
    @admin_required
    def api_admin_validate_vacation(request_id: int):
        data = json_body()
        status = _enum(VacationStatus, data.get("status"), "")
        container.vacation_service.validate(request_id, status, notes=data.get("notes"))
        return jsonify({"success": True})

    @app.route("/api/admin/vacations/<int:request_id>", methods=["DELETE"], endpoint="api_admin_delete_vacation")
    @admin_required
    def api_admin_delete_vacation(request_id: int):
        container.vacation_service.delete(request_id)
        return jsonify({"success": True})

    @app.route("/api/admin/employees/<int:user_id>/vacation-stats", methods=["GET"], endpoint="api_admin_vacation_stats")
    @admin_required
    def api_admin_vacation_stats(user_id: int):
        stats = container.vacation_service.stats(user_id)
        return jsonify({"success": True, **stats.to_dict()})

    @app.route("/api/admin/employees/<int:user_id>/entitlements", methods=["GET"], endpoint="api_admin_entitlements")
    @admin_required
    def api_admin_entitlements(user_id: int):
        year = request.args.get("year", type=int) or now_local().year
        items = container.vacation_service.entitlement_breakdown(user_id, year)
        return jsonify({"success": True, "year": year, "items": [e.to_dict() for e in items]})

    @app.route("/api/admin/employees/<int:user_id>/entitlements", methods=["PUT"], endpoint="api_admin_save_entitlements")
    @admin_required
    def api_admin_save_entitlements(user_id: int):
        data = json_body()
        try:
            year = int(data.get("year") or now_local().year)
        except (TypeError, ValueError):
            raise ValidationError("year must be a number")
        items = data.get("items")
        if not isinstance(items, list):
            raise ValidationError("items must be a list")
        ids = container.vacation_service.save_entitlements(user_id, year, items)
        return jsonify({"success": True, "ids": ids})

    @app.route("/api/admin/entitlements/<int:entitlement_id>", methods=["DELETE"], endpoint="api_admin_delete_entitlement")
    @admin_required
    def api_admin_delete_entitlement(entitlement_id: int):
        container.vacation_service.delete_entitlement(entitlement_id)
        return jsonify({"success": True})

    @app.route("/api/admin/coverage", methods=["GET"], endpoint="api_admin_coverage")
    @admin_required
    def api_admin_coverage():
        rows = container.vacation_service.team_coverage()
        return jsonify({"success": True, "team": [r.to_dict() for r in rows]})
