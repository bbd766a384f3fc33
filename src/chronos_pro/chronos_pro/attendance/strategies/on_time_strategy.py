from __future__ import annotations

from datetime import datetime

from ...employees.model import Profile
from .base import PunchDecision, PunchStrategy


class OnTimeStrategy(PunchStrategy):
    """Entry at or before work_start (or no work_start configured)."""

    def decide_entry(self, *, now: datetime, profile: Profile) -> PunchDecision:
        return PunchDecision(is_late=False)
