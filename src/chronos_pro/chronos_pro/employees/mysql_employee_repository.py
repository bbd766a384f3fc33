from __future__ import annotations

from datetime import datetime, time
from typing import Optional, Sequence

from ..core.enums import AllowedPunchMethod, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json_vector, fetchall, fetchone, load_json_vector, normalize_mysql_time
from .model import Profile
from .repository import UPDATABLE_FIELDS, EmployeeRepository, column_value

_COLUMNS = """
    employee_id, full_name, email, password_hash, role, face_embedding, avatar_url,
    work_start, work_end, punch_method, pin_hash, calendar_color, vacation_entitlement,
    last_seen_at, last_location_id, is_active
"""


def _to_profile(r: dict) -> Profile:
    return Profile(
        user_id=int(r["employee_id"]),
        full_name=r["full_name"],
        email=r["email"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        face_embedding=load_json_vector(r.get("face_embedding")),
        avatar_url=r.get("avatar_url"),
        work_start=normalize_mysql_time(r.get("work_start")),
        work_end=normalize_mysql_time(r.get("work_end")),
        punch_method=AllowedPunchMethod(r.get("punch_method") or "both"),
        pin_hash=r.get("pin_hash"),
        calendar_color=r.get("calendar_color") or "#00E5FF",
        vacation_entitlement=int(r.get("vacation_entitlement") or 0),
        last_seen_at=r.get("last_seen_at"),
        last_location_id=r.get("last_location_id"),
        is_active=bool(r.get("is_active", True)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def get_by_email(self, email: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def list_all(self, *, active_only: bool = False) -> Sequence[Profile]:
        where = "WHERE is_active=1" if active_only else ""
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees {where} ORDER BY full_name ASC")
            return [_to_profile(r) for r in fetchall(cur)]

    def list_with_face(self) -> Sequence[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM employees WHERE is_active=1 AND face_embedding IS NOT NULL"
            )
            return [_to_profile(r) for r in fetchall(cur)]

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(full_name, email, password_hash, role, work_start, work_end)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (full_name, email, password_hash, role.value, work_start, work_end),
            )
            return int(cur.lastrowid)

    def update_fields(self, user_id: int, **fields) -> bool:
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Unsupported employee fields: {sorted(unknown)}")
        if not fields:
            return False

        assignments = ", ".join(f"{name}=%s" for name in fields)
        params = [column_value(v) for v in fields.values()] + [int(user_id)]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE employees SET {assignments} WHERE employee_id=%s", tuple(params))
            return cur.rowcount > 0

    def update_biometrics(self, user_id: int, *, embedding: list[float], avatar_url: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET face_embedding=%s, avatar_url=COALESCE(%s, avatar_url)
                WHERE employee_id=%s
                """,
                (dump_json_vector(embedding), avatar_url, int(user_id)),
            )
            return cur.rowcount > 0

    def touch_presence(self, user_id: int, *, location_id: int, seen_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET last_seen_at=%s, last_location_id=%s WHERE employee_id=%s",
                (seen_at, int(location_id), int(user_id)),
            )
            return cur.rowcount > 0

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE employee_id=%s", (int(user_id),))
            return cur.rowcount > 0
