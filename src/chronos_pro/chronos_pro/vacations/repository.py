from __future__ import annotations

from datetime import date, datetime, time
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import VacationIntensity, VacationStatus, VacationType
from .model import Entitlement, VacationRequest


class VacationRepository(Protocol):
    def get_by_id(self, request_id: int) -> Optional[VacationRequest]:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[VacationRequest]:
        raise NotImplementedError

    def list_all(self) -> Sequence[VacationRequest]:
        """All requests joined with employee name and colour, newest first."""

        raise NotImplementedError

    def list_overlapping(
        self,
        *,
        start: date,
        end: date,
        statuses: Iterable[VacationStatus],
        user_id: Optional[int] = None,
    ) -> Sequence[VacationRequest]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        type: VacationType,
        intensity: VacationIntensity,
        start_time: Optional[time],
        end_time: Optional[time],
        created_at: datetime,
    ) -> int:
        raise NotImplementedError

    def update_status(
        self,
        request_id: int,
        *,
        status: VacationStatus,
        admin_notes: Optional[str] = None,
        decided_at: Optional[datetime] = None,
    ) -> bool:
        raise NotImplementedError

    def delete_by_id(self, request_id: int) -> bool:
        raise NotImplementedError


class EntitlementRepository(Protocol):
    def list_for_user(self, user_id: int, year: int) -> Sequence[Entitlement]:
        """Individual items of the user plus collective items for the year."""

        raise NotImplementedError

    def upsert(self, entitlement: Entitlement) -> int:
        raise NotImplementedError

    def delete_by_id(self, entitlement_id: int) -> bool:
        raise NotImplementedError
