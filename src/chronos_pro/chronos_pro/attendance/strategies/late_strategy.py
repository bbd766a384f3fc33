from __future__ import annotations

from datetime import datetime

from ...common.datetime_utils import format_hhmm
from ...employees.model import Profile
from .base import PunchDecision, PunchStrategy


class LateStrategy(PunchStrategy):
    """First entry of the day after work_start."""

    def decide_entry(self, *, now: datetime, profile: Profile) -> PunchDecision:
        return PunchDecision(is_late=True, note=f"expected {format_hhmm(profile.work_start)}")
