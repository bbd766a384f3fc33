from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...employees.model import Profile


@dataclass(frozen=True)
class PunchDecision:
    is_late: bool = False
    note: Optional[str] = None


class PunchStrategy(ABC):
    """Strategy Pattern: decide what a new entry punch means for the schedule."""

    @abstractmethod
    def decide_entry(self, *, now: datetime, profile: Profile) -> PunchDecision:
        raise NotImplementedError
