from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..biometrics.face import FaceMatcher
from ..common.datetime_utils import now_local
from ..core.enums import PunchMethod, PunchType
from ..core.exceptions import AuthorizationError, BiometricError, NotFoundError
from ..employees.model import Profile
from ..employees.repository import EmployeeRepository
from ..employees.service import AuthService
from ..locations.model import Location
from ..locations.service import LocationService
from ..notifications.service import NotificationService
from .factory import PunchStrategyFactory
from .model import AttendanceLog
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def next_punch_type(last_log: Optional[AttendanceLog]) -> PunchType:
    """Smart protocol: after an entry comes an exit, otherwise an entry."""
    if last_log is not None and last_log.type == PunchType.ENTRY:
        return PunchType.EXIT
    return PunchType.ENTRY


@dataclass(frozen=True)
class PunchResult:
    log: AttendanceLog
    profile: Profile
    location: Location
    is_late: bool = False

    def to_dict(self) -> dict:
        return {
            "log_id": self.log.log_id,
            "type": self.log.type.value,
            "method": self.log.method.value,
            "timestamp": self.log.timestamp.isoformat(timespec="seconds"),
            "employee": self.profile.public_dict(),
            "location": self.location.to_dict(),
            "is_late": self.is_late,
        }


class PunchService:
    """Use cases behind the kiosk: face / PIN punches and the undo switch."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        locations: LocationService,
        auth: AuthService,
        notifications: NotificationService,
        *,
        matcher: Optional[FaceMatcher] = None,
        strategy_factory: Optional[PunchStrategyFactory] = None,
        clock=now_local,
    ):
        self._attendance = attendance
        self._employees = employees
        self._locations = locations
        self._auth = auth
        self._notifications = notifications
        self._matcher = matcher or FaceMatcher()
        self._factory = strategy_factory or PunchStrategyFactory()
        self._clock = clock

    def last_punch(self, user_id: int) -> Optional[AttendanceLog]:
        return self._attendance.get_last_for_user(int(user_id))

    def punch(
        self,
        profile: Profile,
        method: PunchMethod,
        *,
        latitude,
        longitude,
        now: Optional[datetime] = None,
    ) -> PunchResult:
        if not profile.punch_method.allows(method):
            raise AuthorizationError(
                f"{profile.full_name} is not allowed to punch via {method.value}; use {profile.punch_method.value}"
            )

        geofence = self._locations.require_inside(latitude, longitude)
        now = now or self._clock()

        last = self._attendance.get_last_for_user(profile.user_id)
        punch_type = next_punch_type(last)

        is_late = False
        if punch_type == PunchType.ENTRY:
            first_of_day = last is None or last.timestamp.date() != now.date()
            strategy = self._factory.for_entry(now=now, profile=profile, first_of_day=first_of_day)
            is_late = strategy.decide_entry(now=now, profile=profile).is_late

        log_id = self._attendance.create(
            user_id=profile.user_id,
            location_id=geofence.location.location_id,
            type=punch_type,
            method=method,
            timestamp=now,
            latitude=float(latitude),
            longitude=float(longitude),
            is_valid=True,
        )
        log = self._attendance.get_by_id(log_id)
        if log is None:
            raise NotFoundError("Punch was not stored")

        logger.info("Punch %s %s for employee %s via %s", log_id, punch_type.value, profile.user_id, method.value)

        if is_late:
            self._notifications.notify_late(profile, now)

        return PunchResult(log=log, profile=profile, location=geofence.location, is_late=is_late)

    def punch_by_face(self, descriptor: Any, *, latitude, longitude, now: Optional[datetime] = None) -> PunchResult:
        match = self._matcher.identify(descriptor, self._employees.list_with_face())
        if match is None:
            raise BiometricError("Face not recognised. Check your enrolment or try again.")
        return self.punch(match.profile, PunchMethod.FACE, latitude=latitude, longitude=longitude, now=now)

    def punch_by_pin(self, user_id: int, pin: str, *, latitude, longitude, now: Optional[datetime] = None) -> PunchResult:
        profile = self._auth.login_with_pin(user_id, pin)
        return self.punch(profile, PunchMethod.PIN, latitude=latitude, longitude=longitude, now=now)

    def switch_punch(self, log_id: int) -> PunchType:
        log = self._attendance.get_by_id(int(log_id))
        if log is None:
            raise NotFoundError("Attendance log not found")
        new_type = log.type.flipped()
        self._attendance.update_type(log.log_id, new_type)
        logger.info("Switched log %s to %s", log.log_id, new_type.value)
        return new_type
