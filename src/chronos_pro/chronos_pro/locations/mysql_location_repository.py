from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Location
from .repository import LocationRepository


def _to_location(r: dict) -> Location:
    return Location(
        location_id=int(r["location_id"]),
        name=r["name"],
        latitude=float(r["latitude"]),
        longitude=float(r["longitude"]),
        radius_meters=int(r["radius_meters"]),
        is_default=bool(r.get("is_default")),
    )


class MySQLLocationRepository(LocationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Location]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT location_id, name, latitude, longitude, radius_meters, is_default
                FROM locations
                ORDER BY is_default DESC, name ASC
                """
            )
            return [_to_location(r) for r in fetchall(cur)]

    def get_by_id(self, location_id: int) -> Optional[Location]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT location_id, name, latitude, longitude, radius_meters, is_default
                FROM locations
                WHERE location_id=%s
                """,
                (int(location_id),),
            )
            r = fetchone(cur)
            return _to_location(r) if r else None

    def create(self, *, name: str, latitude: float, longitude: float, radius_meters: int, is_default: bool) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO locations(name, latitude, longitude, radius_meters, is_default)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (name, latitude, longitude, int(radius_meters), 1 if is_default else 0),
            )
            return int(cur.lastrowid)

    def update(
        self,
        location_id: int,
        *,
        name: str,
        latitude: float,
        longitude: float,
        radius_meters: int,
        is_default: bool,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE locations
                SET name=%s, latitude=%s, longitude=%s, radius_meters=%s, is_default=%s
                WHERE location_id=%s
                """,
                (name, latitude, longitude, int(radius_meters), 1 if is_default else 0, int(location_id)),
            )
            return cur.rowcount > 0

    def clear_default(self) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE locations SET is_default=0 WHERE is_default=1")

    def delete_by_id(self, location_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM locations WHERE location_id=%s", (int(location_id),))
            return cur.rowcount > 0
