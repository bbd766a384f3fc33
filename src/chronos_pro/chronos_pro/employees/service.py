from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..biometrics.face import validate_descriptor, verify_face
from ..common.datetime_utils import now_local, parse_hhmm
from ..common.validators import (
    require_color,
    require_email,
    require_min_length,
    require_non_empty,
    require_pin,
)
from ..core.constants import DEFAULT_WORK_END, DEFAULT_WORK_START, FACE_MATCH_THRESHOLD
from ..core.enums import AllowedPunchMethod, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .model import Profile, SessionUser
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


def _safe_check(hash_value: Optional[str], secret: str) -> bool:
    if not hash_value:
        return False
    try:
        return check_password_hash(hash_value, secret)
    except Exception:
        # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
        return False


class AuthService:
    """Use cases: admin login (email/password) and kiosk/portal PIN login."""

    def __init__(self, employees: EmployeeRepository, *, face_threshold: float = FACE_MATCH_THRESHOLD):
        self._employees = employees
        self._face_threshold = float(face_threshold)

    def authenticate(self, email: str, password: str) -> SessionUser:
        profile = self._employees.get_by_email((email or "").strip().lower())
        if not profile or not profile.is_active or not _safe_check(profile.password_hash, password or ""):
            raise AuthenticationError("Invalid email or password")
        if profile.role != Role.ADMIN:
            raise AuthorizationError("Dashboard access is restricted to administrators")
        logger.info("Admin %s logged in", profile.user_id)
        return SessionUser(user_id=profile.user_id, full_name=profile.full_name, role=profile.role)

    def verify_pin(self, user_id: int, pin: str) -> bool:
        profile = self._employees.get_by_id(int(user_id))
        if not profile or not profile.is_active:
            return False
        return _safe_check(profile.pin_hash, (pin or "").strip())

    def login_with_pin(self, user_id: int, pin: str) -> Profile:
        if not self.verify_pin(user_id, pin):
            logger.warning("Rejected PIN for employee %s", user_id)
            raise AuthenticationError("Incorrect PIN")
        profile = self._employees.get_by_id(int(user_id))
        if profile is None:
            raise NotFoundError("Employee not found")
        return profile

    def login_with_face(self, user_id: int, descriptor) -> Profile:
        """Strict 1:1 check of a live descriptor against the enrolled one."""
        profile = self._employees.get_by_id(int(user_id))
        if not profile or not profile.is_active:
            raise AuthenticationError("Employee not found")
        if not profile.has_face:
            raise AuthenticationError("No face enrolled for this employee")
        if not verify_face(descriptor, profile.face_embedding, threshold=self._face_threshold):
            logger.warning("Rejected face login for employee %s", user_id)
            raise AuthenticationError("Face does not match")
        return profile


@dataclass(frozen=True)
class EmployeeMetrics:
    total_active: int
    total_with_face: int


class EmployeeService:
    """Use cases: manage employees (admin) and presence heartbeats."""

    def __init__(self, employees: EmployeeRepository, *, clock=now_local):
        self._employees = employees
        self._clock = clock

    def get(self, user_id: int) -> Profile:
        profile = self._employees.get_by_id(int(user_id))
        if not profile:
            raise NotFoundError("Employee not found")
        return profile

    def list_all(self) -> Sequence[Profile]:
        return self._employees.list_all()

    def list_for_picker(self) -> list[dict]:
        return [{"id": p.user_id, "full_name": p.full_name} for p in self._employees.list_all(active_only=True)]

    def create_employee(
        self,
        *,
        email: str,
        password: str,
        full_name: str,
        role: Role = Role.EMPLOYEE,
        work_start: str = "",
        work_end: str = "",
    ) -> int:
        email = require_email(email)
        full_name = require_non_empty(full_name, "Full name")
        require_min_length(password, "Password", 6)

        start = parse_hhmm(work_start) or DEFAULT_WORK_START
        end = parse_hhmm(work_end) or DEFAULT_WORK_END
        if end <= start:
            raise ValidationError("Work end must be after work start")

        if self._employees.get_by_email(email):
            raise ValidationError("Email already registered")

        user_id = self._employees.create(
            full_name=full_name,
            email=email,
            password_hash=generate_password_hash(password),
            role=Role(role),
            work_start=start,
            work_end=end,
        )
        logger.info("Created employee %s (%s)", user_id, role)
        return user_id

    def update_name(self, user_id: int, full_name: str) -> None:
        self._update(user_id, full_name=require_non_empty(full_name, "Full name"))

    def update_role(self, *, current_user_id: int, user_id: int, role: Role) -> None:
        role = Role(role)
        if int(current_user_id) == int(user_id) and role != Role.ADMIN:
            raise AuthorizationError("You cannot remove your own admin role")
        self._update(user_id, role=role)

    def update_punch_method(self, user_id: int, method: AllowedPunchMethod) -> None:
        self._update(user_id, punch_method=AllowedPunchMethod(method))

    def update_pin(self, user_id: int, pin: Optional[str]) -> None:
        if pin is None or not str(pin).strip():
            self._update(user_id, pin_hash=None)
            return
        self._update(user_id, pin_hash=generate_password_hash(require_pin(pin)))

    def update_color(self, user_id: int, color: str) -> None:
        self._update(user_id, calendar_color=require_color(color))

    def update_entitlement(self, user_id: int, days: int) -> None:
        try:
            days = int(days)
        except (TypeError, ValueError):
            raise ValidationError("Entitlement must be a whole number of days")
        if days < 0:
            raise ValidationError("Entitlement cannot be negative")
        self._update(user_id, vacation_entitlement=days)

    def update_hours(self, user_id: int, *, work_start: str, work_end: str) -> None:
        start: Optional[time] = parse_hhmm(work_start)
        end: Optional[time] = parse_hhmm(work_end)
        if not start or not end or end <= start:
            raise ValidationError("Work end must be after work start")
        self._update(user_id, work_start=start, work_end=end)

    def enroll_biometrics(self, user_id: int, descriptor, *, avatar_url: Optional[str] = None) -> None:
        vector = validate_descriptor(descriptor)
        self.get(user_id)
        if not self._employees.update_biometrics(int(user_id), embedding=vector, avatar_url=avatar_url):
            raise ValidationError("Failed to save biometrics")
        logger.info("Enrolled face for employee %s", user_id)

    def delete(self, *, current_user_id: int, user_id: int) -> None:
        if int(current_user_id) == int(user_id):
            raise AuthorizationError("You cannot delete your own account")
        self.get(user_id)
        if not self._employees.delete_by_id(int(user_id)):
            raise ValidationError("Failed to delete employee")

    def metrics(self) -> EmployeeMetrics:
        active = [p for p in self._employees.list_all(active_only=True)]
        return EmployeeMetrics(total_active=len(active), total_with_face=sum(1 for p in active if p.has_face))

    def heartbeat(self, user_id: int, location_id: int, *, now: Optional[datetime] = None) -> None:
        self._employees.touch_presence(int(user_id), location_id=int(location_id), seen_at=now or self._clock())

    def _update(self, user_id: int, **fields) -> None:
        self.get(user_id)
        # existence is settled by get(); a false result only means nothing changed
        if not self._employees.update_fields(int(user_id), **fields):
            logger.debug("Employee %s already had %s", user_id, sorted(fields))
