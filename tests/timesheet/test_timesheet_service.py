from __future__ import annotations

from datetime import date, datetime

import pytest

from fakes import FakeAttendanceRepo, FakeEmployeeRepo, FakeEntitlementRepo, FakeScheduleRepo, FakeVacationRepo
from src.chronos_pro.chronos_pro.attendance.model import AttendanceLog
from src.chronos_pro.chronos_pro.core.enums import PunchMethod, PunchType, TimesheetStatus
from src.chronos_pro.chronos_pro.core.exceptions import NotFoundError, ValidationError
from src.chronos_pro.chronos_pro.timesheet.service import TimesheetService
from src.chronos_pro.chronos_pro.vacations.service import VacationService


@pytest.fixture
def setup(make_profile, clock):
    employees = FakeEmployeeRepo([make_profile(1, "Ana Costa"), make_profile(2, "Old Timer", is_active=False)])
    attendance = FakeAttendanceRepo(
        [
            AttendanceLog(1, 1, 1, PunchType.ENTRY, PunchMethod.FACE, datetime(2026, 3, 10, 9, 0)),
            AttendanceLog(2, 2, 1, PunchType.ENTRY, PunchMethod.PIN, datetime(2026, 3, 10, 9, 5)),
            AttendanceLog(3, 1, 1, PunchType.ENTRY, PunchMethod.FACE, datetime(2026, 2, 27, 9, 0)),
        ]
    )
    vacations = VacationService(FakeVacationRepo(), FakeEntitlementRepo(), employees, clock=clock)
    service = TimesheetService(attendance, employees, FakeScheduleRepo(), vacations, clock=clock)
    return service, attendance


def test_month_only_includes_that_month(setup):
    service, _ = setup

    rows = service.month(2026, 3)

    assert [(r.user_id, r.full_name, r.status) for r in rows] == [
        (1, "Ana Costa", TimesheetStatus.MISSING_PUNCH),
        (2, "Old Timer", TimesheetStatus.MISSING_PUNCH),
    ]
    assert [r.user_id for r in service.month(2026, 3, user_id=1)] == [1]
    with pytest.raises(ValidationError):
        service.month(2026, 13)


def test_edit_slot_inserts_manual_exit(setup):
    service, attendance = setup

    log_id = service.edit_slot(user_id=1, day=date(2026, 3, 10), slot_index=1, hhmm="17:45")

    log = attendance.get_by_id(log_id)
    assert log.type == PunchType.EXIT
    assert log.method == PunchMethod.MANUAL
    assert log.timestamp == datetime(2026, 3, 10, 17, 45)
    assert log.edited_manual is True
    assert service.month(2026, 3, user_id=1)[0].status == TimesheetStatus.OK


def test_edit_slot_moves_existing_log(setup):
    service, attendance = setup

    assert service.edit_slot(user_id=1, day=date(2026, 3, 10), slot_index=0, hhmm="08:30", log_id=1) == 1

    log = attendance.get_by_id(1)
    assert log.timestamp == datetime(2026, 3, 10, 8, 30)
    assert log.edited_manual is True


@pytest.mark.parametrize("hhmm", ["8:30", "24:00", "12:60", "", "noon"])
def test_edit_slot_rejects_bad_times(setup, hhmm):
    service, _ = setup

    with pytest.raises(ValidationError):
        service.edit_slot(user_id=1, day=date(2026, 3, 10), slot_index=0, hhmm=hhmm)


def test_edit_slot_errors(setup):
    service, _ = setup

    with pytest.raises(ValidationError):
        service.edit_slot(user_id=1, day=date(2026, 3, 10), slot_index=8, hhmm="09:00")
    with pytest.raises(NotFoundError):
        service.edit_slot(user_id=1, day=date(2026, 3, 10), slot_index=0, hhmm="09:00", log_id=99)
    with pytest.raises(NotFoundError):
        service.edit_slot(user_id=99, day=date(2026, 3, 10), slot_index=0, hhmm="09:00")


def test_delete_day(setup):
    service, attendance = setup

    assert service.delete_day(user_id=1, day=date(2026, 3, 10)) == 1
    assert [l.log_id for l in attendance.all()] == [3, 2]


def test_edit_slot_resaving_the_same_time(setup):
    service, attendance = setup

    for _ in range(2):
        assert service.edit_slot(user_id=1, day=date(2026, 3, 10), slot_index=0, hhmm="08:30", log_id=1) == 1

    assert attendance.get_by_id(1).timestamp == datetime(2026, 3, 10, 8, 30)
