from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import NotificationType
from .model import Notification


class NotificationRepository(Protocol):
    def create(
        self,
        *,
        user_id: Optional[int],
        title: str,
        message: str,
        type: NotificationType,
        created_at: datetime,
    ) -> int:
        raise NotImplementedError

    def list_recent(self, limit: int) -> Sequence[Notification]:
        raise NotImplementedError

    def count_unread(self) -> int:
        raise NotImplementedError

    def mark_read(self, notification_id: int) -> bool:
        raise NotImplementedError
