from __future__ import annotations

from datetime import datetime

import pytest

from fakes import FakeNotificationRepo
from src.chronos_pro.chronos_pro.core.enums import NotificationType
from src.chronos_pro.chronos_pro.core.exceptions import NotFoundError
from src.chronos_pro.chronos_pro.notifications.service import NotificationService


def test_late_notifications_feed(make_profile):
    service = NotificationService(FakeNotificationRepo())
    ana = make_profile(1, "Ana Costa")

    first = service.notify_late(ana, datetime(2026, 3, 10, 9, 20))
    service.notify_late(ana, datetime(2026, 3, 11, 9, 40))

    recent = service.recent()
    assert [n.created_at.day for n in recent] == [11, 10]
    assert recent[0].type == NotificationType.WARNING
    assert recent[0].message == "Ana Costa clocked in at 09:40 (expected 09:00)"
    assert len(service.recent(limit=1)) == 1
    assert service.unread_count() == 2

    service.mark_read(first)
    assert service.unread_count() == 1
    assert recent[1].to_dict()["is_read"] is False


def test_mark_unknown_notification():
    with pytest.raises(NotFoundError):
        NotificationService(FakeNotificationRepo()).mark_read(42)


def test_mark_read_twice(make_profile):
    service = NotificationService(FakeNotificationRepo())
    nid = service.notify_late(make_profile(1, "Ana Costa"), datetime(2026, 3, 10, 9, 20))

    service.mark_read(nid)
    service.mark_read(nid)

    assert service.unread_count() == 0
