from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import Optional

from ..common.datetime_utils import format_hhmm
from ..core.constants import PUNCH_PAIRS_PER_DAY

DAY_NAMES = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")

TimePair = tuple[Optional[time], Optional[time]]


def _blank_pairs() -> tuple[TimePair, ...]:
    return tuple((None, None) for _ in range(PUNCH_PAIRS_PER_DAY))


@dataclass(frozen=True)
class WorkSchedule:
    """One weekday of an employee's weekly matrix (0 = Sunday .. 6 = Saturday)."""

    user_id: int
    day_of_week: int
    pairs: tuple[TimePair, ...] = field(default_factory=_blank_pairs)

    @property
    def has_work(self) -> bool:
        return any(start and end for start, end in self.pairs)

    @property
    def worked_minutes(self) -> int:
        total = 0
        for start, end in self.pairs:
            if start and end:
                total += (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)
        return total

    def to_dict(self) -> dict:
        row: dict = {"day_of_week": self.day_of_week, "day_name": DAY_NAMES[self.day_of_week]}
        for i, (start, end) in enumerate(self.pairs, start=1):
            row[f"pair_{i}_start"] = format_hhmm(start)
            row[f"pair_{i}_end"] = format_hhmm(end)
        return row
