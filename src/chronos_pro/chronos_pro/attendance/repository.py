from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PunchMethod, PunchType
from .model import AttendanceLog, AttendanceReportRow


class AttendanceRepository(Protocol):
    def get_by_id(self, log_id: int) -> Optional[AttendanceLog]:
        raise NotImplementedError

    def get_last_for_user(self, user_id: int) -> Optional[AttendanceLog]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        location_id: Optional[int],
        type: PunchType,
        method: PunchMethod,
        timestamp: datetime,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        is_valid: bool = True,
        edited_manual: bool = False,
    ) -> int:
        raise NotImplementedError

    def update_type(self, log_id: int, type: PunchType) -> bool:
        raise NotImplementedError

    def update_timestamp(self, log_id: int, timestamp: datetime) -> bool:
        """Admin correction; also flags the log as edited_manual."""

        raise NotImplementedError

    def list_between(self, *, start: datetime, end: datetime, user_id: Optional[int] = None) -> Sequence[AttendanceLog]:
        """Logs with start <= timestamp < end, oldest first."""

        raise NotImplementedError

    def delete_for_user_and_date(self, user_id: int, day: date) -> int:
        raise NotImplementedError

    def get_report_rows(
        self,
        *,
        start: datetime,
        end: datetime,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
