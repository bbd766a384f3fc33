from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import NotificationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Notification
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: Optional[int],
        title: str,
        message: str,
        type: NotificationType,
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(user_id, title, message, type, is_read, created_at)
                VALUES(%s,%s,%s,%s,0,%s)
                """,
                (user_id, title, message, type.value, created_at),
            )
            return int(cur.lastrowid)

    def list_recent(self, limit: int) -> Sequence[Notification]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT notification_id, user_id, title, message, type, is_read, created_at
                FROM notifications
                ORDER BY created_at DESC, notification_id DESC
                LIMIT %s
                """,
                (int(limit),),
            )
            return [
                Notification(
                    notification_id=int(r["notification_id"]),
                    user_id=r.get("user_id"),
                    title=r["title"],
                    message=r["message"],
                    type=NotificationType(r["type"]),
                    is_read=bool(r["is_read"]),
                    created_at=r["created_at"],
                )
                for r in fetchall(cur)
            ]

    def count_unread(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM notifications WHERE is_read=0")
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def mark_read(self, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE notifications SET is_read=1 WHERE notification_id=%s", (int(notification_id),))
            return cur.rowcount > 0
