from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import WorkSchedule


class ScheduleRepository(Protocol):
    def list_for_user(self, user_id: int) -> Sequence[WorkSchedule]:
        raise NotImplementedError

    def list_all(self, *, user_id: Optional[int] = None) -> Sequence[WorkSchedule]:
        raise NotImplementedError

    def upsert(self, schedule: WorkSchedule) -> None:
        """Insert or replace the row for (user_id, day_of_week)."""

        raise NotImplementedError
