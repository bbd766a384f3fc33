from __future__ import annotations

from datetime import datetime, time
from typing import Optional, Protocol, Sequence

from ..core.enums import AllowedPunchMethod, Role
from .model import Profile


class EmployeeRepository(Protocol):
    """Repository interface for employee profiles.

    Services depend on this interface, never on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[Profile]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Profile]:
        raise NotImplementedError

    def list_all(self, *, active_only: bool = False) -> Sequence[Profile]:
        raise NotImplementedError

    def list_with_face(self) -> Sequence[Profile]:
        """Active profiles that have an enrolled face embedding."""

        raise NotImplementedError

    def create(
        self,
        *,
        full_name: str,
        email: str,
        password_hash: str,
        role: Role,
        work_start: Optional[time],
        work_end: Optional[time],
    ) -> int:
        raise NotImplementedError

    def update_fields(self, user_id: int, **fields) -> bool:
        """Update whitelisted columns (full_name, role, punch_method, pin_hash,
        calendar_color, vacation_entitlement, work_start, work_end, is_active)."""

        raise NotImplementedError

    def update_biometrics(self, user_id: int, *, embedding: list[float], avatar_url: Optional[str]) -> bool:
        raise NotImplementedError

    def touch_presence(self, user_id: int, *, location_id: int, seen_at: datetime) -> bool:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError


UPDATABLE_FIELDS = frozenset(
    {
        "full_name",
        "role",
        "punch_method",
        "pin_hash",
        "calendar_color",
        "vacation_entitlement",
        "work_start",
        "work_end",
        "is_active",
    }
)


def column_value(value):
    if isinstance(value, (Role, AllowedPunchMethod)):
        return value.value
    return value
