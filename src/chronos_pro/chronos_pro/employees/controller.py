from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, flash, jsonify, redirect, render_template, request, session, url_for

from ..common.web import admin_required, current_user, json_body
from ..core.enums import AllowedPunchMethod, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from ..container import Container
from .model import Profile

logger = logging.getLogger(__name__)


def _admin_view(p: Profile) -> dict:
    data = p.public_dict()
    data.update(
        {
            "email": p.email,
            "has_face": p.has_face,
            "has_pin": p.has_pin,
            "vacation_entitlement": p.vacation_entitlement,
            "is_active": p.is_active,
            "last_seen_at": p.last_seen_at.isoformat(timespec="seconds") if p.last_seen_at else None,
        }
    )
    return data


def register(app: Flask, container: Container) -> None:
    @app.route("/login", methods=["GET", "POST"], endpoint="login")
    def login():
        if session.get("role") == Role.ADMIN.value:
            return redirect(url_for("admin_dashboard"))

        if request.method == "POST":
            email = request.form.get("email", "")
            password = request.form.get("password", "")
            remember = request.form.get("remember_me")

            try:
                s_user = container.auth_service.authenticate(email, password)

                session.permanent = bool(remember)
                app.permanent_session_lifetime = timedelta(days=7)

                session["user_id"] = s_user.user_id
                session["name"] = s_user.full_name
                session["role"] = s_user.role.value

                flash("Welcome back!", "success")
                return redirect(url_for("admin_dashboard"))
            except (AuthenticationError, AuthorizationError) as e:
                flash(str(e), "danger")

        return render_template("login.html")

    @app.route("/logout", endpoint="logout")
    def logout():
        session.pop("user_id", None)
        session.pop("name", None)
        session.pop("role", None)
        flash("Signed out.", "info")
        return redirect(url_for("login"))

    @app.route("/admin", endpoint="admin_dashboard")
    @admin_required
    def admin_dashboard():
        metrics = container.employee_service.metrics()
        return render_template(
            "admin/dashboard.html",
            current_user=current_user(),
            metrics=metrics,
            employees=[_admin_view(p) for p in container.employee_service.list_all()],
            locations=container.location_service.list_all(),
            unread=container.notification_service.unread_count(),
        )

    @app.route("/api/admin/metrics", methods=["GET"], endpoint="api_admin_metrics")
    @admin_required
    def api_admin_metrics():
        m = container.employee_service.metrics()
        return jsonify({"success": True, "total_active": m.total_active, "total_with_face": m.total_with_face})

    @app.route("/api/admin/employees", methods=["GET"], endpoint="api_admin_employees")
    @admin_required
    def api_admin_employees():
        return jsonify({"success": True, "employees": [_admin_view(p) for p in container.employee_service.list_all()]})

    @app.route("/api/admin/employees", methods=["POST"], endpoint="api_admin_create_employee")
    @admin_required
    def api_admin_create_employee():
        data = json_body()
        try:
            role = Role(data.get("role") or Role.EMPLOYEE.value)
        except ValueError:
            raise ValidationError("Invalid role")

        user_id = container.employee_service.create_employee(
            email=data.get("email", ""),
            password=data.get("password", ""),
            full_name=data.get("full_name", ""),
            role=role,
            work_start=data.get("work_start", ""),
            work_end=data.get("work_end", ""),
        )
        return jsonify({"success": True, "id": user_id}), 201

    @app.route("/api/admin/employees/<int:user_id>", methods=["PATCH"], endpoint="api_admin_update_employee")
    @admin_required
    def api_admin_update_employee(user_id: int):
        data = json_body()
        svc = container.employee_service

        if "full_name" in data:
            svc.update_name(user_id, data["full_name"])
        if "role" in data:
            try:
                role = Role(data["role"])
            except ValueError:
                raise ValidationError("Invalid role")
            svc.update_role(current_user_id=int(session["user_id"]), user_id=user_id, role=role)
        if "punch_method" in data:
            try:
                method = AllowedPunchMethod(data["punch_method"])
            except ValueError:
                raise ValidationError("Invalid punch method")
            svc.update_punch_method(user_id, method)
        if "pin" in data:
            svc.update_pin(user_id, data["pin"])
        if "calendar_color" in data:
            svc.update_color(user_id, data["calendar_color"])
        if "vacation_entitlement" in data:
            svc.update_entitlement(user_id, data["vacation_entitlement"])
        if "work_start" in data or "work_end" in data:
            svc.update_hours(user_id, work_start=data.get("work_start", ""), work_end=data.get("work_end", ""))

        return jsonify({"success": True, "employee": _admin_view(svc.get(user_id))})

    @app.route("/api/admin/employees/<int:user_id>", methods=["DELETE"], endpoint="api_admin_delete_employee")
    @admin_required
    def api_admin_delete_employee(user_id: int):
        container.employee_service.delete(current_user_id=int(session["user_id"]), user_id=user_id)
        return jsonify({"success": True})

    @app.route("/api/admin/employees/<int:user_id>/biometrics", methods=["POST"], endpoint="api_admin_biometrics")
    @admin_required
    def api_admin_biometrics(user_id: int):
        """Enrol a face: either a ready descriptor or a camera snapshot (data URL)."""
        data = json_body()
        descriptor = data.get("descriptor")
        if descriptor is None:
            descriptor = container.face_encoder.encode(data.get("image", ""))

        container.employee_service.enroll_biometrics(user_id, descriptor, avatar_url=data.get("photo_url"))
        return jsonify({"success": True, "message": "Face enrolled"})
