from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Optional

from ..core.constants import DEFAULT_CALENDAR_COLOR, DEFAULT_VACATION_ENTITLEMENT
from ..core.enums import AllowedPunchMethod, Role


@dataclass(frozen=True)
class Profile:
    """Domain entity: an employee (or admin) profile.

    Plain data object, no DB access code.
    """

    user_id: int
    full_name: str
    email: str
    password_hash: str
    role: Role
    face_embedding: Optional[list[float]] = None
    avatar_url: Optional[str] = None
    work_start: Optional[time] = None
    work_end: Optional[time] = None
    punch_method: AllowedPunchMethod = AllowedPunchMethod.BOTH
    pin_hash: Optional[str] = None
    calendar_color: str = DEFAULT_CALENDAR_COLOR
    vacation_entitlement: int = DEFAULT_VACATION_ENTITLEMENT
    last_seen_at: Optional[datetime] = None
    last_location_id: Optional[int] = None
    is_active: bool = True

    @property
    def has_face(self) -> bool:
        return bool(self.face_embedding)

    @property
    def has_pin(self) -> bool:
        return bool(self.pin_hash)

    def public_dict(self) -> dict:
        """What the kiosk/portal may see (no hashes, no embedding)."""
        return {
            "id": self.user_id,
            "full_name": self.full_name,
            "role": self.role.value,
            "avatar_url": self.avatar_url,
            "work_start": self.work_start.strftime("%H:%M") if self.work_start else None,
            "work_end": self.work_end.strftime("%H:%M") if self.work_end else None,
            "punch_method": self.punch_method.value,
            "calendar_color": self.calendar_color,
        }


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after admin login."""

    user_id: int
    full_name: str
    role: Role
