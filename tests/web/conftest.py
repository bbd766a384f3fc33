from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from fakes import (
    FakeAttendanceRepo,
    FakeEmployeeRepo,
    FakeEntitlementRepo,
    FakeLocationRepo,
    FakeNotificationRepo,
    FakeScheduleRepo,
    FakeVacationRepo,
)
from src.chronos_pro.chronos_pro.attendance.service import PunchService
from src.chronos_pro.chronos_pro.biometrics.encoder import FaceEncoder
from src.chronos_pro.chronos_pro.container import Container
from src.chronos_pro.chronos_pro.core.enums import Role
from src.chronos_pro.chronos_pro.employees.service import AuthService, EmployeeService
from src.chronos_pro.chronos_pro.locations.service import LocationService
from src.chronos_pro.chronos_pro.main import create_app
from src.chronos_pro.chronos_pro.notifications.service import NotificationService
from src.chronos_pro.chronos_pro.reports.service import ReportService
from src.chronos_pro.chronos_pro.schedules.service import ScheduleService
from src.chronos_pro.chronos_pro.timesheet.service import TimesheetService
from src.chronos_pro.chronos_pro.vacations.service import VacationService


@pytest.fixture
def repos(make_profile, office, descriptor):
    employees = FakeEmployeeRepo(
        [
            make_profile(1, "Admin Demo", email="admin@chronos.local", role=Role.ADMIN),
            make_profile(2, "Ana Costa", email="ana@chronos.local", pin_hash=generate_password_hash("1234"), face_embedding=descriptor),
            make_profile(3, "Rui Lopes", email="rui@chronos.local", pin_hash=generate_password_hash("5678")),
        ]
    )
    return {
        "employees": employees,
        "attendance": FakeAttendanceRepo(names={2: "Ana Costa", 3: "Rui Lopes"}, location_names={1: office.name}),
        "locations": FakeLocationRepo([office]),
        "notifications": FakeNotificationRepo(),
        "schedules": FakeScheduleRepo(),
        "vacations": FakeVacationRepo(),
        "entitlements": FakeEntitlementRepo(),
    }


@pytest.fixture
def container(repos, clock):
    auth = AuthService(repos["employees"])
    locations = LocationService(repos["locations"])
    notifications = NotificationService(repos["notifications"])
    vacations = VacationService(
        repos["vacations"], repos["entitlements"], repos["employees"], repos["locations"], clock=clock
    )
    return Container(
        auth_service=auth,
        employee_service=EmployeeService(repos["employees"], clock=clock),
        location_service=locations,
        punch_service=PunchService(
            repos["attendance"], repos["employees"], locations, auth, notifications, clock=clock
        ),
        timesheet_service=TimesheetService(
            repos["attendance"], repos["employees"], repos["schedules"], vacations, clock=clock
        ),
        schedule_service=ScheduleService(repos["schedules"]),
        vacation_service=vacations,
        notification_service=notifications,
        report_service=ReportService(repos["attendance"], clock=clock),
        face_encoder=FaceEncoder(),
    )


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(client):
    with client.session_transaction() as sess:
        sess["user_id"] = 1
        sess["name"] = "Admin Demo"
        sess["role"] = Role.ADMIN.value
    return client
