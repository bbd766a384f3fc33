from __future__ import annotations

from typing import Optional, Sequence

from ..core.constants import PUNCH_PAIRS_PER_DAY
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_time
from .model import WorkSchedule
from .repository import ScheduleRepository

_PAIR_COLUMNS = [f"pair_{i}_{side}" for i in range(1, PUNCH_PAIRS_PER_DAY + 1) for side in ("start", "end")]


def _to_schedule(r: dict) -> WorkSchedule:
    pairs = tuple(
        (normalize_mysql_time(r.get(f"pair_{i}_start")), normalize_mysql_time(r.get(f"pair_{i}_end")))
        for i in range(1, PUNCH_PAIRS_PER_DAY + 1)
    )
    return WorkSchedule(user_id=int(r["user_id"]), day_of_week=int(r["day_of_week"]), pairs=pairs)


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, user_id: int) -> Sequence[WorkSchedule]:
        return self.list_all(user_id=user_id)

    def list_all(self, *, user_id: Optional[int] = None) -> Sequence[WorkSchedule]:
        where = "WHERE user_id=%s" if user_id is not None else ""
        params = (int(user_id),) if user_id is not None else ()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT user_id, day_of_week, {", ".join(_PAIR_COLUMNS)}
                FROM work_schedules
                {where}
                ORDER BY user_id ASC, day_of_week ASC
                """,
                params,
            )
            return [_to_schedule(r) for r in fetchall(cur)]

    def upsert(self, schedule: WorkSchedule) -> None:
        values: list[object] = []
        for start, end in schedule.pairs:
            values.extend([start, end])

        placeholders = ",".join(["%s"] * (2 + len(_PAIR_COLUMNS)))
        updates = ", ".join(f"{c}=VALUES({c})" for c in _PAIR_COLUMNS)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO work_schedules(user_id, day_of_week, {", ".join(_PAIR_COLUMNS)})
                VALUES({placeholders})
                ON DUPLICATE KEY UPDATE {updates}
                """,
                (int(schedule.user_id), int(schedule.day_of_week), *values),
            )
