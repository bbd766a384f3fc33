from __future__ import annotations

from datetime import time

import pytest
from werkzeug.security import check_password_hash, generate_password_hash

from fakes import FakeEmployeeRepo
from src.chronos_pro.chronos_pro.core.enums import AllowedPunchMethod, Role
from src.chronos_pro.chronos_pro.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from src.chronos_pro.chronos_pro.employees.service import AuthService, EmployeeService


@pytest.fixture
def repo(make_profile):
    return FakeEmployeeRepo(
        [
            make_profile(1, "Admin Demo", email="admin@chronos.local", role=Role.ADMIN),
            make_profile(2, "Ana Costa", email="ana@chronos.local", pin_hash=generate_password_hash("1234")),
            make_profile(3, "Former Staff", email="old@chronos.local", is_active=False),
        ]
    )


def test_authenticate_admin(repo):
    user = AuthService(repo).authenticate(" Admin@Chronos.local ", "secret123")

    assert user.user_id == 1
    assert user.role == Role.ADMIN


def test_authenticate_rejects_bad_password_and_non_admins(repo):
    auth = AuthService(repo)

    with pytest.raises(AuthenticationError):
        auth.authenticate("admin@chronos.local", "nope")
    with pytest.raises(AuthenticationError):
        auth.authenticate("old@chronos.local", "secret123")
    with pytest.raises(AuthorizationError):
        auth.authenticate("ana@chronos.local", "secret123")


def test_pin_login(repo):
    auth = AuthService(repo)

    assert auth.login_with_pin(2, "1234").full_name == "Ana Costa"
    assert auth.verify_pin(1, "1234") is False
    with pytest.raises(AuthenticationError):
        auth.login_with_pin(2, "4321")


def test_face_login(repo, descriptor):
    auth = AuthService(repo)
    with pytest.raises(AuthenticationError, match="No face enrolled"):
        auth.login_with_face(2, descriptor)

    EmployeeService(repo).enroll_biometrics(2, descriptor, avatar_url="/static/ana.jpg")

    assert auth.login_with_face(2, descriptor).user_id == 2
    with pytest.raises(AuthenticationError):
        auth.login_with_face(2, [0.9] * 128)


def test_create_employee_hashes_password_and_uses_default_hours(repo):
    service = EmployeeService(repo)

    uid = service.create_employee(email="New@Chronos.local", password="longpass", full_name="Nuno Reis")

    created = service.get(uid)
    assert created.email == "new@chronos.local"
    assert created.role == Role.EMPLOYEE
    assert (created.work_start, created.work_end) == (time(9, 0), time(18, 0))
    assert check_password_hash(created.password_hash, "longpass")


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(email="ana@chronos.local", password="longpass", full_name="Dup"),
        dict(email="x@chronos.local", password="short", full_name="Short"),
        dict(email="bad-email", password="longpass", full_name="Bad"),
        dict(email="y@chronos.local", password="longpass", full_name="Night", work_start="18:00", work_end="09:00"),
    ],
)
def test_create_employee_validation(repo, kwargs):
    with pytest.raises(ValidationError):
        EmployeeService(repo).create_employee(**kwargs)


def test_admin_cannot_demote_or_delete_self(repo):
    service = EmployeeService(repo)

    with pytest.raises(AuthorizationError):
        service.update_role(current_user_id=1, user_id=1, role=Role.EMPLOYEE)
    with pytest.raises(AuthorizationError):
        service.delete(current_user_id=1, user_id=1)

    service.update_role(current_user_id=1, user_id=2, role="admin")
    assert service.get(2).role == Role.ADMIN


def test_profile_updates(repo):
    service = EmployeeService(repo)

    service.update_pin(2, "567890")
    service.update_color(2, "#ff00aa")
    service.update_entitlement(2, "25")
    service.update_hours(2, work_start="08:30", work_end="17:00")
    service.update_punch_method(2, "face")

    p = service.get(2)
    assert check_password_hash(p.pin_hash, "567890")
    assert p.calendar_color == "#FF00AA"
    assert p.vacation_entitlement == 25
    assert p.work_start == time(8, 30)
    assert p.punch_method == AllowedPunchMethod.FACE

    service.update_pin(2, "")
    assert service.get(2).has_pin is False


def test_profile_update_validation(repo):
    service = EmployeeService(repo)

    with pytest.raises(ValidationError):
        service.update_pin(2, "12")
    with pytest.raises(ValidationError):
        service.update_color(2, "red")
    with pytest.raises(ValidationError):
        service.update_entitlement(2, -1)
    with pytest.raises(ValidationError):
        service.update_hours(2, work_start="17:00", work_end="08:00")
    with pytest.raises(NotFoundError):
        service.update_name(99, "Ghost")


def test_enroll_biometrics_rejects_short_descriptor(repo):
    with pytest.raises(ValidationError):
        EmployeeService(repo).enroll_biometrics(2, [0.1] * 10)


def test_metrics_picker_and_heartbeat(repo, descriptor, fixed_now):
    service = EmployeeService(repo, clock=lambda: fixed_now)
    service.enroll_biometrics(2, descriptor)

    metrics = service.metrics()
    assert (metrics.total_active, metrics.total_with_face) == (2, 1)
    assert [e["full_name"] for e in service.list_for_picker()] == ["Admin Demo", "Ana Costa"]

    service.heartbeat(2, 1)
    assert service.get(2).last_seen_at == fixed_now
    assert service.get(2).last_location_id == 1


def test_delete_employee(repo):
    service = EmployeeService(repo)

    service.delete(current_user_id=1, user_id=3)

    with pytest.raises(NotFoundError):
        service.get(3)


def test_saving_unchanged_values_is_not_an_error(repo, monkeypatch):
    monkeypatch.setattr(repo, "update_fields", repo.update_changed_only)
    service = EmployeeService(repo)

    service.update_name(2, "Ana Costa")
    service.update_role(current_user_id=1, user_id=2, role="employee")
    service.update_punch_method(2, "both")

    p = service.get(2)
    assert p.full_name == "Ana Costa"
    assert p.role == Role.EMPLOYEE
    assert p.punch_method == AllowedPunchMethod.BOTH
