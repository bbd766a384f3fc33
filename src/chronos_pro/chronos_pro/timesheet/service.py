from __future__ import annotations

import logging
import re
from datetime import date, datetime, timedelta
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_bounds, now_local
from ..core.enums import PunchMethod
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..schedules.repository import ScheduleRepository
from ..vacations.service import VacationService
from .builder import SLOT_COUNT, TimesheetRow, build_timesheet, slot_type

logger = logging.getLogger(__name__)

_HHMM_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


class TimesheetService:
    """Use cases: monthly reconciliation grid and admin corrections."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        schedules: ScheduleRepository,
        vacations: VacationService,
        *,
        clock=now_local,
    ):
        self._attendance = attendance
        self._employees = employees
        self._schedules = schedules
        self._vacations = vacations
        self._clock = clock

    def month(self, year: int, month: int, *, user_id: Optional[int] = None) -> list[TimesheetRow]:
        if not 1 <= int(month) <= 12:
            raise ValidationError("Month must be between 1 and 12")
        start, end = month_bounds(int(year), int(month))

        logs = self._attendance.list_between(
            start=datetime.combine(start, datetime.min.time()),
            end=datetime.combine(end + timedelta(days=1), datetime.min.time()),
            user_id=user_id,
        )
        vacations = self._vacations.approved_between(start, end, user_id=user_id)
        schedules = self._schedules.list_all(user_id=user_id)

        profiles = self._employees.list_all()
        names = {p.user_id: p.full_name for p in profiles}
        roster = [p.user_id for p in profiles if p.is_active and (user_id is None or p.user_id == int(user_id))]

        return build_timesheet(
            logs, vacations, schedules, names, start=start, end=end, until=self._clock().date(), roster=roster
        )

    def edit_slot(
        self,
        *,
        user_id: int,
        day: date,
        slot_index: int,
        hhmm: str,
        log_id: Optional[int] = None,
    ) -> int:
        slot_index = int(slot_index)
        if not 0 <= slot_index < SLOT_COUNT:
            raise ValidationError(f"Slot must be between 0 and {SLOT_COUNT - 1}")
        match = _HHMM_RE.match((hhmm or "").strip())
        if not match:
            raise ValidationError("Invalid format. Use HH:MM")

        timestamp = datetime.combine(day, datetime.min.time()).replace(
            hour=int(match.group(1)), minute=int(match.group(2))
        )

        if log_id:
            if not self._attendance.update_timestamp(int(log_id), timestamp):
                raise NotFoundError("Attendance log not found")
            logger.info("Admin edited log %s to %s", log_id, timestamp)
            return int(log_id)

        if not self._employees.get_by_id(int(user_id)):
            raise NotFoundError("Employee not found")
        new_id = self._attendance.create(
            user_id=int(user_id),
            location_id=None,
            type=slot_type(slot_index),
            method=PunchMethod.MANUAL,
            timestamp=timestamp,
            is_valid=True,
            edited_manual=True,
        )
        logger.info("Admin inserted manual %s log %s for employee %s", slot_type(slot_index).value, new_id, user_id)
        return new_id

    def delete_day(self, *, user_id: int, day: date) -> int:
        removed = self._attendance.delete_for_user_and_date(int(user_id), day)
        logger.info("Deleted %s logs of employee %s on %s", removed, user_id, day)
        return removed

