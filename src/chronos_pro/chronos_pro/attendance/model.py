from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import PunchMethod, PunchType


@dataclass(frozen=True)
class AttendanceLog:
    """Domain entity: a single entry or exit punch."""

    log_id: int
    user_id: int
    location_id: Optional[int]
    type: PunchType
    method: PunchMethod
    timestamp: datetime
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    is_valid: bool = True
    edited_manual: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.log_id,
            "user_id": self.user_id,
            "location_id": self.location_id,
            "type": self.type.value,
            "method": self.method.value,
            "timestamp": self.timestamp.isoformat(timespec="seconds"),
            "is_valid": self.is_valid,
            "edited_manual": self.edited_manual,
        }


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for exports (log joined with employee and location)."""

    log_id: int
    user_id: int
    full_name: str
    type: PunchType
    method: PunchMethod
    timestamp: datetime
    location_name: Optional[str]
    is_valid: bool
