from __future__ import annotations

from dataclasses import dataclass

from .attendance.factory import PunchStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import PunchService
from .biometrics.encoder import FaceEncoder
from .biometrics.face import FaceMatcher
from .core.constants import FACE_MATCH_THRESHOLD, FACE_SEARCH_THRESHOLD
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.service import AuthService, EmployeeService
from .locations.mysql_location_repository import MySQLLocationRepository
from .locations.service import LocationService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.service import NotificationService
from .reports.service import ReportService
from .schedules.mysql_schedule_repository import MySQLScheduleRepository
from .schedules.service import ScheduleService
from .timesheet.service import TimesheetService
from .vacations.mysql_entitlement_repository import MySQLEntitlementRepository
from .vacations.mysql_vacation_repository import MySQLVacationRepository
from .vacations.service import VacationService


@dataclass(frozen=True)
class Container:
    auth_service: AuthService
    employee_service: EmployeeService
    location_service: LocationService
    punch_service: PunchService
    timesheet_service: TimesheetService
    schedule_service: ScheduleService
    vacation_service: VacationService
    notification_service: NotificationService
    report_service: ReportService
    face_encoder: FaceEncoder


def build_container(
    *,
    db_config: dict,
    face_match_threshold: float = FACE_MATCH_THRESHOLD,
    face_search_threshold: float = FACE_SEARCH_THRESHOLD,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    employees_repo = MySQLEmployeeRepository(conn)
    locations_repo = MySQLLocationRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    schedules_repo = MySQLScheduleRepository(conn)
    vacations_repo = MySQLVacationRepository(conn)
    entitlements_repo = MySQLEntitlementRepository(conn)
    notifications_repo = MySQLNotificationRepository(conn)

    auth_service = AuthService(employees_repo, face_threshold=face_match_threshold)
    employee_service = EmployeeService(employees_repo)
    location_service = LocationService(locations_repo)
    notification_service = NotificationService(notifications_repo)
    punch_service = PunchService(
        attendance_repo,
        employees_repo,
        location_service,
        auth_service,
        notification_service,
        matcher=FaceMatcher(threshold=face_search_threshold),
        strategy_factory=PunchStrategyFactory(),
    )
    vacation_service = VacationService(vacations_repo, entitlements_repo, employees_repo, locations_repo)
    timesheet_service = TimesheetService(attendance_repo, employees_repo, schedules_repo, vacation_service)
    schedule_service = ScheduleService(schedules_repo)
    report_service = ReportService(attendance_repo)

    return Container(
        auth_service=auth_service,
        employee_service=employee_service,
        location_service=location_service,
        punch_service=punch_service,
        timesheet_service=timesheet_service,
        schedule_service=schedule_service,
        vacation_service=vacation_service,
        notification_service=notification_service,
        report_service=report_service,
        face_encoder=FaceEncoder(),
    )
