from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..core.enums import PunchMethod, PunchType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceLog, AttendanceReportRow
from .repository import AttendanceRepository

_COLUMNS = """
    log_id, user_id, location_id, type, verification_method, timestamp,
    latitude, longitude, is_valid, edited_manual
"""


def _to_log(r: dict) -> AttendanceLog:
    return AttendanceLog(
        log_id=int(r["log_id"]),
        user_id=int(r["user_id"]),
        location_id=r.get("location_id"),
        type=PunchType(r["type"]),
        method=PunchMethod(r["verification_method"]),
        timestamp=r["timestamp"],
        latitude=float(r["latitude"]) if r.get("latitude") is not None else None,
        longitude=float(r["longitude"]) if r.get("longitude") is not None else None,
        is_valid=bool(r.get("is_valid", True)),
        edited_manual=bool(r.get("edited_manual", False)),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, log_id: int) -> Optional[AttendanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_logs WHERE log_id=%s", (int(log_id),))
            r = fetchone(cur)
            return _to_log(r) if r else None

    def get_last_for_user(self, user_id: int) -> Optional[AttendanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_logs
                WHERE user_id=%s
                ORDER BY timestamp DESC, log_id DESC
                LIMIT 1
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return _to_log(r) if r else None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_logs(
                    user_id, location_id, type, verification_method, timestamp,
                    latitude, longitude, is_valid, edited_manual
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(user_id),
                    location_id,
                    type.value,
                    method.value,
                    timestamp,
                    latitude,
                    longitude,
                    1 if is_valid else 0,
                    1 if edited_manual else 0,
                ),
            )
            return int(cur.lastrowid)

    def update_type(self, log_id: int, type: PunchType) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE attendance_logs SET type=%s WHERE log_id=%s", (type.value, int(log_id)))
            return cur.rowcount > 0

    def update_timestamp(self, log_id: int, timestamp: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_logs SET timestamp=%s, edited_manual=1 WHERE log_id=%s",
                (timestamp, int(log_id)),
            )
            return cur.rowcount > 0

    def list_between(self, *, start: datetime, end: datetime, user_id: Optional[int] = None) -> Sequence[AttendanceLog]:
        clauses = ["timestamp >= %s", "timestamp < %s"]
        params: list[object] = [start, end]
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_logs
                WHERE {" AND ".join(clauses)}
                ORDER BY timestamp ASC, log_id ASC
                """,
                tuple(params),
            )
            return [_to_log(r) for r in fetchall(cur)]

    def delete_for_user_and_date(self, user_id: int, day: date) -> int:
        start = datetime.combine(day, datetime.min.time())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM attendance_logs WHERE user_id=%s AND timestamp >= %s AND timestamp < %s",
                (int(user_id), start, start + timedelta(days=1)),
            )
            return int(cur.rowcount)

    def get_report_rows(
        self,
        *,
        start: datetime,
        end: datetime,
        user_id: Optional[int] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["al.timestamp >= %s", "al.timestamp < %s"]
        params: list[object] = [start, end]
        if user_id is not None:
            clauses.append("al.user_id=%s")
            params.append(int(user_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    al.log_id, al.user_id, e.full_name, al.type, al.verification_method,
                    al.timestamp, l.name AS location_name, al.is_valid
                FROM attendance_logs al
                JOIN employees e ON e.employee_id = al.user_id
                LEFT JOIN locations l ON l.location_id = al.location_id
                WHERE {" AND ".join(clauses)}
                ORDER BY al.timestamp DESC, al.log_id DESC
                """,
                tuple(params),
            )
            return [
                AttendanceReportRow(
                    log_id=int(r["log_id"]),
                    user_id=int(r["user_id"]),
                    full_name=r["full_name"],
                    type=PunchType(r["type"]),
                    method=PunchMethod(r["verification_method"]),
                    timestamp=r["timestamp"],
                    location_name=r.get("location_name"),
                    is_valid=bool(r["is_valid"]),
                )
                for r in fetchall(cur)
            ]
