from __future__ import annotations

import logging
from typing import Iterable, Mapping, Sequence

from ..common.datetime_utils import parse_hhmm
from ..core.constants import PUNCH_PAIRS_PER_DAY
from ..core.exceptions import ValidationError
from .model import DAY_NAMES, WorkSchedule
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)

MONDAY = 1


def copy_day(matrix: Sequence[dict], targets: Iterable[int], *, source_day: int = MONDAY) -> list[dict]:
    """Return a copy of the matrix with source_day's pairs copied onto each target day."""

    rows = [dict(r) for r in matrix]
    source = next((r for r in rows if int(r["day_of_week"]) == int(source_day)), None)
    if source is None:
        raise ValidationError(f"Day {source_day} is missing from the schedule")

    wanted = {int(t) for t in targets} - {int(source_day)}
    for row in rows:
        if int(row["day_of_week"]) in wanted:
            for i in range(1, PUNCH_PAIRS_PER_DAY + 1):
                row[f"pair_{i}_start"] = source.get(f"pair_{i}_start", "")
                row[f"pair_{i}_end"] = source.get(f"pair_{i}_end", "")
    return rows


def parse_schedule_row(user_id: int, row: Mapping) -> WorkSchedule:
    try:
        dow = int(row["day_of_week"])
    except (KeyError, TypeError, ValueError):
        raise ValidationError("Each schedule row needs a day_of_week")
    if not 0 <= dow <= 6:
        raise ValidationError("day_of_week must be between 0 (Sunday) and 6 (Saturday)")

    pairs = []
    for i in range(1, PUNCH_PAIRS_PER_DAY + 1):
        start = parse_hhmm(row.get(f"pair_{i}_start"))
        end = parse_hhmm(row.get(f"pair_{i}_end"))
        if bool(start) != bool(end):
            raise ValidationError(f"{DAY_NAMES[dow]}: pair {i} needs both start and end")
        if start and end and end <= start:
            raise ValidationError(f"{DAY_NAMES[dow]}: pair {i} ends before it starts")
        pairs.append((start, end))

    filled = sorted((p for p in pairs if p[0]), key=lambda p: p[0])
    for prev, cur in zip(filled, filled[1:]):
        if cur[0] < prev[1]:
            raise ValidationError(f"{DAY_NAMES[dow]}: pairs overlap")

    return WorkSchedule(user_id=int(user_id), day_of_week=dow, pairs=tuple(pairs))


class ScheduleService:
    """Use cases: read and save an employee's weekly matrix."""

    def __init__(self, schedules: ScheduleRepository):
        self._schedules = schedules

    def get_matrix(self, user_id: int) -> list[dict]:
        existing = {s.day_of_week: s for s in self._schedules.list_for_user(int(user_id))}
        return [
            existing.get(dow, WorkSchedule(user_id=int(user_id), day_of_week=dow)).to_dict()
            for dow in range(7)
        ]

    def save_matrix(self, user_id: int, rows: Sequence[Mapping]) -> int:
        parsed = [parse_schedule_row(user_id, r) for r in rows]
        days = [s.day_of_week for s in parsed]
        if len(days) != len(set(days)):
            raise ValidationError("Duplicate day in schedule")

        for schedule in parsed:
            self._schedules.upsert(schedule)
        logger.info("Saved %s schedule rows for employee %s", len(parsed), user_id)
        return len(parsed)
