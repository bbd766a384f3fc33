from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..common.datetime_utils import format_hhmm
from ..core.enums import (
    EntitlementScope,
    EntitlementUsage,
    VacationIntensity,
    VacationStatus,
    VacationType,
)


@dataclass(frozen=True)
class VacationRequest:
    """Domain entity: a vacation or absence request.

    full_name / calendar_color are filled by list queries that join employees.
    """

    request_id: int
    user_id: int
    start_date: date
    end_date: date
    type: VacationType
    status: VacationStatus
    intensity: VacationIntensity = VacationIntensity.FULL
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    admin_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    full_name: Optional[str] = None
    calendar_color: Optional[str] = None

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date

    def overlaps(self, start: date, end: date) -> bool:
        return self.start_date <= end and start <= self.end_date

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "user_id": self.user_id,
            "full_name": self.full_name,
            "calendar_color": self.calendar_color,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "type": self.type.value,
            "status": self.status.value,
            "intensity": self.intensity.value,
            "start_time": format_hhmm(self.start_time) or None,
            "end_time": format_hhmm(self.end_time) or None,
            "admin_notes": self.admin_notes,
        }


@dataclass(frozen=True)
class Entitlement:
    """One line of an employee's yearly vacation entitlement.

    Collective items (company-wide days) have no user_id.
    """

    entitlement_id: Optional[int]
    user_id: Optional[int]
    label: str
    days: int
    year: int
    usage_type: EntitlementUsage = EntitlementUsage.REQUESTED
    fixed_date: Optional[date] = None
    scope: EntitlementScope = EntitlementScope.INDIVIDUAL
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.entitlement_id,
            "user_id": self.user_id,
            "label": self.label,
            "days": self.days,
            "year": self.year,
            "usage_type": self.usage_type.value,
            "fixed_date": self.fixed_date.isoformat() if self.fixed_date else None,
            "scope": self.scope.value,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class VacationStats:
    entitlement: float
    pending: float
    scheduled: float
    taken: float
    fixed: float
    available: float

    def to_dict(self) -> dict:
        return {
            "entitlement": self.entitlement,
            "pending": self.pending,
            "scheduled": self.scheduled,
            "taken": self.taken,
            "fixed": self.fixed,
            "available": self.available,
        }


@dataclass(frozen=True)
class CoverageRow:
    user_id: int
    full_name: str
    calendar_color: str
    is_online: bool
    last_seen_at: Optional[datetime]
    location_name: Optional[str]
    vacation_status: Optional[VacationStatus]
    vacation_type: Optional[VacationType]

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "full_name": self.full_name,
            "calendar_color": self.calendar_color,
            "is_online": self.is_online,
            "last_seen_at": self.last_seen_at.isoformat(timespec="seconds") if self.last_seen_at else None,
            "location_name": self.location_name,
            "vacation_status": self.vacation_status.value if self.vacation_status else None,
            "vacation_type": self.vacation_type.value if self.vacation_type else None,
        }
