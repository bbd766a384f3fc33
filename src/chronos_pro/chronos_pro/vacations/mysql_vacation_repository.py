from __future__ import annotations

from datetime import date, datetime, time
from typing import Iterable, Optional, Sequence

from ..core.enums import VacationIntensity, VacationStatus, VacationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import VacationRequest
from .repository import VacationRepository

_SELECT = """
    SELECT
        vr.request_id, vr.user_id, vr.start_date, vr.end_date, vr.type, vr.status,
        vr.intensity, vr.start_time, vr.end_time, vr.admin_notes, vr.created_at,
        e.full_name, e.calendar_color
    FROM vacation_requests vr
    JOIN employees e ON e.employee_id = vr.user_id
"""


def _to_request(r: dict) -> VacationRequest:
    return VacationRequest(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        type=VacationType(r["type"]),
        status=VacationStatus(r["status"]),
        intensity=VacationIntensity(r.get("intensity") or "full"),
        start_time=normalize_mysql_time(r.get("start_time")),
        end_time=normalize_mysql_time(r.get("end_time")),
        admin_notes=r.get("admin_notes"),
        created_at=r.get("created_at"),
        full_name=r.get("full_name"),
        calendar_color=r.get("calendar_color"),
    )


class MySQLVacationRepository(VacationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, request_id: int) -> Optional[VacationRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE vr.request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_for_user(self, user_id: int) -> Sequence[VacationRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE vr.user_id=%s ORDER BY vr.start_date DESC", (int(user_id),))
            return [_to_request(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[VacationRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} ORDER BY vr.created_at DESC, vr.request_id DESC")
            return [_to_request(r) for r in fetchall(cur)]

    def list_overlapping(
        self,
        *,
        start: date,
        end: date,
        statuses: Iterable[VacationStatus],
        user_id: Optional[int] = None,
    ) -> Sequence[VacationRequest]:
        status_values = [s.value for s in statuses]
        if not status_values:
            return []

        clauses = ["vr.start_date <= %s", "vr.end_date >= %s", f"vr.status IN ({','.join(['%s'] * len(status_values))})"]
        params: list[object] = [end, start, *status_values]
        if user_id is not None:
            clauses.append("vr.user_id=%s")
            params.append(int(user_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {' AND '.join(clauses)} ORDER BY vr.start_date ASC", tuple(params))
            return [_to_request(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        type: VacationType,
        intensity: VacationIntensity,
        start_time: Optional[time],
        end_time: Optional[time],
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO vacation_requests(
                    user_id, start_date, end_date, type, status, intensity, start_time, end_time, created_at
                )
                VALUES(%s,%s,%s,%s,'pending',%s,%s,%s,%s)
                """,
                (int(user_id), start_date, end_date, type.value, intensity.value, start_time, end_time, created_at),
            )
            return int(cur.lastrowid)

    def update_status(
        self,
        request_id: int,
        *,
        status: VacationStatus,
        admin_notes: Optional[str] = None,
        decided_at: Optional[datetime] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE vacation_requests
                SET status=%s, admin_notes=COALESCE(%s, admin_notes), decided_at=%s
                WHERE request_id=%s
                """,
                (status.value, admin_notes, decided_at, int(request_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM vacation_requests WHERE request_id=%s", (int(request_id),))
            return cur.rowcount > 0
