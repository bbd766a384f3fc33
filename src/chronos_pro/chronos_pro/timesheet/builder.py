"""Monthly timesheet grid.

Each (employee, day) row has 8 slots: E1 S1 E2 S2 E3 S3 E4 S4. Punches are laid
out in time order; an entry moves to the next pair when the current pair
already has an entry, an exit closes the current pair.
"""
from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

from ..attendance.model import AttendanceLog
from ..common.datetime_utils import day_of_week, format_minutes, iter_days
from ..core.constants import PUNCH_PAIRS_PER_DAY
from ..core.enums import PunchType, TimesheetStatus
from ..schedules.model import WorkSchedule
from ..vacations.model import VacationRequest

SLOT_COUNT = PUNCH_PAIRS_PER_DAY * 2
SLOT_LABELS = tuple(f"{'E' if i % 2 == 0 else 'S'}{i // 2 + 1}" for i in range(SLOT_COUNT))
EMPTY_TOTAL = "--:--"


def slot_type(slot_index: int) -> PunchType:
    return PunchType.ENTRY if slot_index % 2 == 0 else PunchType.EXIT


@dataclass(frozen=True)
class SlotCell:
    log_id: int
    time: str
    is_manual: bool = False

    def to_dict(self) -> dict:
        return {"log_id": self.log_id, "time": self.time, "is_manual": self.is_manual}


@dataclass(frozen=True)
class TimesheetRow:
    user_id: int
    full_name: str
    day: date
    slots: tuple[Optional[SlotCell], ...]
    status: TimesheetStatus
    total_minutes: int = 0

    @property
    def total(self) -> str:
        return format_minutes(self.total_minutes) if self.total_minutes > 0 else EMPTY_TOTAL

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "full_name": self.full_name,
            "date": self.day.isoformat(),
            "slots": [s.to_dict() if s else None for s in self.slots],
            "status": self.status.value,
            "total": self.total,
        }


def fill_slots(daily_logs: Sequence[AttendanceLog]) -> list[Optional[AttendanceLog]]:
    slots: list[Optional[AttendanceLog]] = [None] * SLOT_COUNT
    pair = 0
    for log in sorted(daily_logs, key=lambda l: (l.timestamp, l.log_id)):
        if pair >= PUNCH_PAIRS_PER_DAY:
            break
        if log.type == PunchType.ENTRY:
            if slots[pair * 2] is not None:
                pair += 1
            if pair < PUNCH_PAIRS_PER_DAY:
                slots[pair * 2] = log
        else:
            slots[pair * 2 + 1] = log
            pair += 1
    return slots


def worked_minutes(slots: Sequence[Optional[AttendanceLog]]) -> int:
    total = 0
    for i in range(0, len(slots), 2):
        entry, exit_ = slots[i], slots[i + 1]
        if entry and exit_:
            minutes = int((exit_.timestamp - entry.timestamp).total_seconds() // 60)
            if minutes > 0:
                total += minutes
    return total


def has_open_pair(slots: Sequence[Optional[AttendanceLog]]) -> bool:
    return any((slots[i] is None) != (slots[i + 1] is None) for i in range(0, len(slots), 2))


def build_timesheet(
    logs: Iterable[AttendanceLog],
    vacations: Iterable[VacationRequest],
    schedules: Iterable[WorkSchedule],
    names: Mapping[int, str],
    *,
    start: date,
    end: date,
    until: Optional[date] = None,
    roster: Optional[Iterable[int]] = None,
) -> list[TimesheetRow]:
    """Rows for every (employee, day) in [start, end] that has punches, an
    approved vacation, or a scheduled working day with nothing recorded.

    names labels the rows; roster (default: every key of names) limits which
    employees can be marked absent.
    """

    until = until or end

    grouped: dict[tuple[int, date], list[AttendanceLog]] = defaultdict(list)
    for log in logs:
        day = log.timestamp.date()
        if start <= day <= end:
            grouped[(log.user_id, day)].append(log)

    vacation_days: set[tuple[int, date]] = set()
    for vac in vacations:
        for day in iter_days(max(vac.start_date, start), min(vac.end_date, end)):
            vacation_days.add((vac.user_id, day))

    working_days: set[tuple[int, int]] = {(s.user_id, s.day_of_week) for s in schedules if s.has_work}

    keys = set(grouped) | vacation_days
    for user_id in (names if roster is None else roster):
        for day in iter_days(start, min(end, until)):
            if (user_id, day_of_week(day)) in working_days:
                keys.add((user_id, day))

    rows = []
    for user_id, day in keys:
        daily = grouped.get((user_id, day), [])
        slots = fill_slots(daily)

        if (user_id, day) in vacation_days:
            status = TimesheetStatus.VACATION
        elif not daily:
            status = TimesheetStatus.ABSENT
        elif has_open_pair(slots):
            status = TimesheetStatus.MISSING_PUNCH
        else:
            status = TimesheetStatus.OK

        rows.append(
            TimesheetRow(
                user_id=user_id,
                full_name=names.get(user_id, f"#{user_id}"),
                day=day,
                slots=tuple(
                    SlotCell(log_id=s.log_id, time=s.timestamp.strftime("%H:%M"), is_manual=s.edited_manual) if s else None
                    for s in slots
                ),
                status=status,
                total_minutes=worked_minutes(slots),
            )
        )

    rows.sort(key=lambda r: (-r.day.toordinal(), r.full_name))
    return rows
