from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from ..employees.model import Profile
from .strategies.base import PunchStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.on_time_strategy import OnTimeStrategy


@dataclass
class PunchStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    grace_minutes: int = 0

    def for_entry(self, *, now: datetime, profile: Profile, first_of_day: bool) -> PunchStrategy:
        if not first_of_day or not profile.work_start:
            return OnTimeStrategy()

        work_start = datetime.combine(now.date(), profile.work_start)
        if now <= work_start + timedelta(minutes=self.grace_minutes):
            return OnTimeStrategy()
        return LateStrategy()
