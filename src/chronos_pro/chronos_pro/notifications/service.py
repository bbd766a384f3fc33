from __future__ import annotations

import logging
from datetime import datetime
from typing import Sequence

from ..common.datetime_utils import format_hhmm
from ..core.constants import DEFAULT_NOTIFICATION_LIMIT
from ..core.enums import NotificationType
from ..core.exceptions import NotFoundError
from ..employees.model import Profile
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def notify_late(self, profile: Profile, when: datetime) -> int:
        message = f"{profile.full_name} clocked in at {when.strftime('%H:%M')} (expected {format_hhmm(profile.work_start)})"
        logger.info("Late entry: %s", message)
        return self._notifications.create(
            user_id=profile.user_id,
            title="Late entry",
            message=message,
            type=NotificationType.WARNING,
            created_at=when,
        )

    def recent(self, limit: int = DEFAULT_NOTIFICATION_LIMIT) -> Sequence[Notification]:
        return self._notifications.list_recent(max(1, int(limit)))

    def unread_count(self) -> int:
        return self._notifications.count_unread()

    def mark_read(self, notification_id: int) -> None:
        if not self._notifications.mark_read(int(notification_id)):
            raise NotFoundError("Notification not found")
