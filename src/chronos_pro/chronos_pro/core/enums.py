from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User role used for access control."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class PunchType(str, Enum):
    ENTRY = "entry"
    EXIT = "exit"

    def flipped(self) -> "PunchType":
        return PunchType.EXIT if self is PunchType.ENTRY else PunchType.ENTRY


class PunchMethod(str, Enum):
    """How a punch was verified at the terminal (manual = inserted by an admin)."""

    FACE = "face"
    BIOMETRIC = "biometric"
    PIN = "pin"
    MANUAL = "manual"


class AllowedPunchMethod(str, Enum):
    """Which verification methods an employee may use."""

    FACE = "face"
    PIN = "pin"
    BOTH = "both"

    def allows(self, method: PunchMethod) -> bool:
        if self is AllowedPunchMethod.BOTH:
            return True
        return self.value == method.value


class VacationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class VacationType(str, Enum):
    VACATION = "vacation"
    ABSENCE = "absence"


class VacationIntensity(str, Enum):
    FULL = "full"
    MORNING = "morning"
    AFTERNOON = "afternoon"
    PARTIAL = "partial"

    @property
    def is_half_day(self) -> bool:
        return self in {VacationIntensity.MORNING, VacationIntensity.AFTERNOON}


class EntitlementScope(str, Enum):
    INDIVIDUAL = "individual"
    COLLECTIVE = "collective"


class EntitlementUsage(str, Enum):
    REQUESTED = "requested"
    FIXED = "fixed"


class TimesheetStatus(str, Enum):
    OK = "ok"
    MISSING_PUNCH = "missing_punch"
    ABSENT = "absent"
    VACATION = "vacation"


class NotificationType(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ALERT = "alert"
