from __future__ import annotations

from typing import Sequence

from ..core.enums import EntitlementScope, EntitlementUsage
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Entitlement
from .repository import EntitlementRepository


class MySQLEntitlementRepository(EntitlementRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, user_id: int, year: int) -> Sequence[Entitlement]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT entitlement_id, user_id, label, days, year, usage_type, fixed_date, scope, notes
                FROM employee_entitlements
                WHERE year=%s AND (user_id=%s OR scope='collective')
                ORDER BY scope DESC, entitlement_id ASC
                """,
                (int(year), int(user_id)),
            )
            return [
                Entitlement(
                    entitlement_id=int(r["entitlement_id"]),
                    user_id=r.get("user_id"),
                    label=r["label"],
                    days=int(r["days"]),
                    year=int(r["year"]),
                    usage_type=EntitlementUsage(r["usage_type"]),
                    fixed_date=r.get("fixed_date"),
                    scope=EntitlementScope(r["scope"]),
                    notes=r.get("notes"),
                )
                for r in fetchall(cur)
            ]

    def upsert(self, entitlement: Entitlement) -> int:
        params = (
            entitlement.user_id,
            entitlement.label,
            int(entitlement.days),
            int(entitlement.year),
            entitlement.usage_type.value,
            entitlement.fixed_date,
            entitlement.scope.value,
            entitlement.notes,
        )
        with db_cursor(self._conn_factory) as (_, cur):
            if entitlement.entitlement_id:
                cur.execute(
                    """
                    UPDATE employee_entitlements
                    SET user_id=%s, label=%s, days=%s, year=%s, usage_type=%s, fixed_date=%s, scope=%s, notes=%s
                    WHERE entitlement_id=%s
                    """,
                    (*params, int(entitlement.entitlement_id)),
                )
                return int(entitlement.entitlement_id)

            cur.execute(
                """
                INSERT INTO employee_entitlements(user_id, label, days, year, usage_type, fixed_date, scope, notes)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                params,
            )
            return int(cur.lastrowid)

    def delete_by_id(self, entitlement_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employee_entitlements WHERE entitlement_id=%s", (int(entitlement_id),))
            return cur.rowcount > 0
