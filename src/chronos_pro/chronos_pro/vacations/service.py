from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import iter_days, now_local, parse_hhmm, parse_iso_date
from ..common.validators import require_non_empty
from ..core.constants import (
    AFTERNOON_WINDOW,
    BASE_ENTITLEMENT_LABEL,
    DEFAULT_CALENDAR_COLOR,
    MORNING_WINDOW,
    PRESENCE_WINDOW_MINUTES,
)
from ..core.enums import (
    EntitlementScope,
    EntitlementUsage,
    VacationIntensity,
    VacationStatus,
    VacationType,
)
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..locations.repository import LocationRepository
from .model import CoverageRow, Entitlement, VacationRequest, VacationStats
from .repository import EntitlementRepository, VacationRepository

logger = logging.getLogger(__name__)

ACTIVE_STATUSES = (VacationStatus.PENDING, VacationStatus.APPROVED)
WORKDAY_MINUTES = 8 * 60


def _minutes(t: time) -> int:
    return t.hour * 60 + t.minute


def day_weight(intensity: VacationIntensity, start_time: Optional[time] = None, end_time: Optional[time] = None) -> float:
    """Fraction of a working day consumed by one day of a request."""
    if intensity.is_half_day:
        return 0.5
    if intensity == VacationIntensity.PARTIAL:
        if start_time and end_time and end_time > start_time:
            return min(1.0, (_minutes(end_time) - _minutes(start_time)) / WORKDAY_MINUTES)
        return 0.5
    return 1.0


def request_day_count(request: VacationRequest, *, year: Optional[int] = None) -> float:
    """Weekdays inside the request (optionally clipped to one year) times the day weight."""
    start, end = request.start_date, request.end_date
    if year is not None:
        start = max(start, date(year, 1, 1))
        end = min(end, date(year, 12, 31))
    weekdays = sum(1 for d in iter_days(start, end) if d.weekday() < 5)
    return weekdays * day_weight(request.intensity, request.start_time, request.end_time)


def _window_for(intensity: VacationIntensity) -> tuple[Optional[time], Optional[time]]:
    if intensity == VacationIntensity.MORNING:
        return MORNING_WINDOW
    if intensity == VacationIntensity.AFTERNOON:
        return AFTERNOON_WINDOW
    return None, None


class VacationService:
    """Use cases: vacation requests, entitlement accounting and team coverage."""

    def __init__(
        self,
        vacations: VacationRepository,
        entitlements: EntitlementRepository,
        employees: EmployeeRepository,
        locations: Optional[LocationRepository] = None,
        *,
        clock=now_local,
    ):
        self._vacations = vacations
        self._entitlements = entitlements
        self._employees = employees
        self._locations = locations
        self._clock = clock

    # ----- requests -----

    def request_vacation(
        self,
        user_id: int,
        *,
        start: date,
        end: date,
        type: VacationType = VacationType.VACATION,
        intensity: VacationIntensity = VacationIntensity.FULL,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
    ) -> int:
        type = VacationType(type)
        intensity = VacationIntensity(intensity)
        profile = self._employees.get_by_id(int(user_id))
        if not profile:
            raise NotFoundError("Employee not found")
        if end < start:
            raise ValidationError("End date must be on or after the start date")

        if intensity == VacationIntensity.PARTIAL:
            t_start, t_end = parse_hhmm(start_time), parse_hhmm(end_time)
            if not t_start or not t_end or t_end <= t_start:
                raise ValidationError("Partial requests need a start and end time")
        else:
            t_start, t_end = _window_for(intensity)

        if self._vacations.list_overlapping(start=start, end=end, statuses=ACTIVE_STATUSES, user_id=int(user_id)):
            raise ValidationError("You already have a request covering these dates")

        if type == VacationType.VACATION:
            draft = VacationRequest(
                request_id=0,
                user_id=int(user_id),
                start_date=start,
                end_date=end,
                type=type,
                status=VacationStatus.PENDING,
                intensity=intensity,
                start_time=t_start,
                end_time=t_end,
            )
            days = request_day_count(draft)
            if days <= 0:
                raise ValidationError("The selected period has no working days")
            stats = self.stats(int(user_id), today=start)
            if days > stats.available - stats.pending:
                raise ValidationError(
                    f"Not enough vacation days: requested {days:g}, available {stats.available - stats.pending:g}"
                )

        request_id = self._vacations.create(
            user_id=int(user_id),
            start_date=start,
            end_date=end,
            type=type,
            intensity=intensity,
            start_time=t_start,
            end_time=t_end,
            created_at=self._clock(),
        )
        logger.info("Vacation request %s (%s %s..%s) for employee %s", request_id, type.value, start, end, user_id)
        return request_id

    def request_days(
        self,
        user_id: int,
        days: Iterable[date],
        *,
        type: VacationType = VacationType.VACATION,
        intensity: VacationIntensity = VacationIntensity.FULL,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
    ) -> list[int]:
        """One single-day request per selected date (non-contiguous selection)."""
        chosen = sorted(set(days))
        if not chosen:
            raise ValidationError("Select at least one day")
        return [
            self.request_vacation(
                user_id, start=d, end=d, type=type, intensity=intensity, start_time=start_time, end_time=end_time
            )
            for d in chosen
        ]

    def cancel(self, user_id: int, request_id: int, *, today: Optional[date] = None) -> None:
        today = today or self._clock().date()
        req = self._require(request_id)
        if req.user_id != int(user_id):
            raise AuthorizationError("You can only cancel your own requests")

        cancellable = req.status == VacationStatus.PENDING or (
            req.status == VacationStatus.APPROVED and req.start_date > today
        )
        if not cancellable:
            raise ValidationError("This request can no longer be cancelled")

        self._vacations.update_status(req.request_id, status=VacationStatus.CANCELLED)
        logger.info("Employee %s cancelled vacation request %s", user_id, request_id)

    def validate(self, request_id: int, status: VacationStatus, *, notes: Optional[str] = None) -> None:
        status = VacationStatus(status)
        if status not in (VacationStatus.APPROVED, VacationStatus.REJECTED):
            raise ValidationError("Status must be approved or rejected")
        req = self._require(request_id)
        if req.status != VacationStatus.PENDING:
            raise ValidationError("Only pending requests can be validated")

        self._vacations.update_status(
            req.request_id, status=status, admin_notes=(notes or "").strip() or None, decided_at=self._clock()
        )
        logger.info("Vacation request %s %s", request_id, status.value)

    def delete(self, request_id: int) -> None:
        if not self._vacations.delete_by_id(int(request_id)):
            raise NotFoundError("Vacation request not found")

    def admin_list(self) -> Sequence[VacationRequest]:
        return self._vacations.list_all()

    def approved_between(self, start: date, end: date, *, user_id: Optional[int] = None) -> Sequence[VacationRequest]:
        return self._vacations.list_overlapping(
            start=start, end=end, statuses=(VacationStatus.APPROVED,), user_id=user_id
        )

    # ----- entitlements -----

    def entitlement_breakdown(self, user_id: int, year: int) -> list[Entitlement]:
        profile = self._employees.get_by_id(int(user_id))
        if not profile:
            raise NotFoundError("Employee not found")

        items = list(self._entitlements.list_for_user(int(user_id), int(year)))
        has_base = any("base" in item.label.lower() for item in items)
        if not has_base and profile.vacation_entitlement:
            items.insert(
                0,
                Entitlement(
                    entitlement_id=None,
                    user_id=profile.user_id,
                    label=BASE_ENTITLEMENT_LABEL,
                    days=profile.vacation_entitlement,
                    year=int(year),
                ),
            )
        return items

    def save_entitlements(self, user_id: int, year: int, items: Sequence[Mapping]) -> list[int]:
        parsed = [self._parse_entitlement(int(user_id), int(year), item) for item in items]
        ids = [self._entitlements.upsert(e) for e in parsed]
        logger.info("Saved %s entitlement items for employee %s (%s)", len(ids), user_id, year)
        return ids

    def delete_entitlement(self, entitlement_id: int) -> None:
        if not self._entitlements.delete_by_id(int(entitlement_id)):
            raise NotFoundError("Entitlement not found")

    def _parse_entitlement(self, user_id: int, year: int, item: Mapping) -> Entitlement:
        label = require_non_empty(str(item.get("label") or ""), "Label")
        try:
            days = int(round(float(item.get("days", 0))))
        except (TypeError, ValueError):
            raise ValidationError(f"{label}: days must be a number")
        if days < 0:
            raise ValidationError(f"{label}: days cannot be negative")

        try:
            usage = EntitlementUsage(item.get("usage_type") or EntitlementUsage.REQUESTED.value)
            scope = EntitlementScope(item.get("scope") or EntitlementScope.INDIVIDUAL.value)
        except ValueError:
            raise ValidationError(f"{label}: invalid usage type or scope")

        fixed_date = None
        if usage == EntitlementUsage.FIXED:
            if not item.get("fixed_date"):
                raise ValidationError(f"{label}: fixed items need a date")
            fixed_date = parse_iso_date(str(item["fixed_date"]))

        raw_id = item.get("id")
        return Entitlement(
            entitlement_id=int(raw_id) if raw_id else None,
            user_id=None if scope == EntitlementScope.COLLECTIVE else user_id,
            label=label,
            days=days,
            year=year,
            usage_type=usage,
            fixed_date=fixed_date,
            scope=scope,
            notes=item.get("notes") or None,
        )

    # ----- stats / views -----

    def stats(self, user_id: int, *, today: Optional[date] = None) -> VacationStats:
        today = today or self._clock().date()
        year = today.year

        breakdown = self.entitlement_breakdown(user_id, year)
        entitlement = float(sum(e.days for e in breakdown))
        fixed = float(sum(e.days for e in breakdown if e.usage_type == EntitlementUsage.FIXED))

        pending = scheduled = taken = 0.0
        for req in self._vacations.list_for_user(int(user_id)):
            if req.type != VacationType.VACATION:
                continue
            if not req.overlaps(date(year, 1, 1), date(year, 12, 31)):
                continue
            days = request_day_count(req, year=year)
            if req.status == VacationStatus.PENDING:
                pending += days
            elif req.status == VacationStatus.APPROVED:
                if req.start_date >= today:
                    scheduled += days
                else:
                    taken += days

        available = entitlement - fixed - scheduled - taken
        return VacationStats(
            entitlement=entitlement,
            pending=pending,
            scheduled=scheduled,
            taken=taken,
            fixed=fixed,
            available=available,
        )

    def portal_data(self, user_id: int, *, today: Optional[date] = None) -> dict:
        today = today or self._clock().date()
        own = list(self._vacations.list_for_user(int(user_id)))
        own_ids = {r.request_id for r in own}
        team = [
            r
            for r in self._vacations.list_all()
            if r.status == VacationStatus.APPROVED and r.request_id not in own_ids
        ]

        requests = [dict(r.to_dict(), is_own=True) for r in own]
        requests += [
            dict(r.to_dict(), is_own=False, calendar_color=r.calendar_color or DEFAULT_CALENDAR_COLOR) for r in team
        ]
        return {
            "requests": requests,
            "stats": self.stats(int(user_id), today=today).to_dict(),
            "entitlements": [e.to_dict() for e in self.entitlement_breakdown(int(user_id), today.year)],
        }

    def team_coverage(self, *, now: Optional[datetime] = None) -> list[CoverageRow]:
        now = now or self._clock()
        today = now.date()
        window = timedelta(minutes=PRESENCE_WINDOW_MINUTES)

        location_names: dict[int, str] = {}
        if self._locations is not None:
            location_names = {loc.location_id: loc.name for loc in self._locations.list_all()}

        today_requests: dict[int, VacationRequest] = {}
        for req in self._vacations.list_overlapping(start=today, end=today, statuses=ACTIVE_STATUSES):
            current = today_requests.get(req.user_id)
            if current is None or req.status == VacationStatus.APPROVED:
                today_requests[req.user_id] = req

        rows = []
        for profile in self._employees.list_all(active_only=True):
            seen = profile.last_seen_at
            req = today_requests.get(profile.user_id)
            rows.append(
                CoverageRow(
                    user_id=profile.user_id,
                    full_name=profile.full_name,
                    calendar_color=profile.calendar_color,
                    is_online=bool(seen and timedelta(0) <= now - seen <= window),
                    last_seen_at=seen,
                    location_name=location_names.get(profile.last_location_id) if profile.last_location_id else None,
                    vacation_status=req.status if req else None,
                    vacation_type=req.type if req else None,
                )
            )
        return rows

    def _require(self, request_id: int) -> VacationRequest:
        req = self._vacations.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Vacation request not found")
        return req
