from __future__ import annotations

from datetime import date, datetime, time, timedelta

import pytest

from fakes import FakeEmployeeRepo, FakeEntitlementRepo, FakeLocationRepo, FakeVacationRepo
from src.chronos_pro.chronos_pro.core.enums import (
    EntitlementScope,
    EntitlementUsage,
    VacationIntensity,
    VacationStatus,
    VacationType,
)
from src.chronos_pro.chronos_pro.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.chronos_pro.chronos_pro.vacations.model import Entitlement, VacationRequest
from src.chronos_pro.chronos_pro.vacations.service import VacationService, day_weight, request_day_count


def _req(rid, user_id, start, end, status, *, type=VacationType.VACATION, intensity=VacationIntensity.FULL, **kw):
    return VacationRequest(rid, user_id, start, end, type, status, intensity, **kw)


@pytest.fixture
def employees(make_profile):
    return FakeEmployeeRepo([make_profile(1, "Ana Costa"), make_profile(2, "Rui Lopes", calendar_color="#FF0000")])


@pytest.fixture
def make_service(employees, office, clock):
    def _make(requests=(), entitlements=()):
        vacations = FakeVacationRepo(requests)
        service = VacationService(
            vacations, FakeEntitlementRepo(entitlements), employees, FakeLocationRepo([office]), clock=clock
        )
        return service, vacations

    return _make


def test_day_weight():
    assert day_weight(VacationIntensity.FULL) == 1.0
    assert day_weight(VacationIntensity.MORNING) == 0.5
    assert day_weight(VacationIntensity.AFTERNOON) == 0.5
    assert day_weight(VacationIntensity.PARTIAL, time(9), time(11)) == 0.25
    assert day_weight(VacationIntensity.PARTIAL) == 0.5


def test_request_day_count_skips_weekends_and_clips_year():
    week_and_weekend = _req(1, 1, date(2026, 3, 16), date(2026, 3, 22), VacationStatus.APPROVED)
    mornings = _req(2, 1, date(2026, 3, 16), date(2026, 3, 20), VacationStatus.APPROVED, intensity=VacationIntensity.MORNING)
    new_year = _req(3, 1, date(2025, 12, 29), date(2026, 1, 2), VacationStatus.APPROVED)

    assert request_day_count(week_and_weekend) == 5
    assert request_day_count(mornings) == 2.5
    assert request_day_count(new_year, year=2026) == 2


def test_request_vacation_fills_half_day_window(make_service):
    service, vacations = make_service()

    rid = service.request_vacation(1, start=date(2026, 3, 16), end=date(2026, 3, 16), intensity="morning")

    req = vacations.get_by_id(rid)
    assert req.status == VacationStatus.PENDING
    assert (req.start_time, req.end_time) == (time(9, 0), time(13, 0))


def test_request_vacation_validation(make_service):
    service, _ = make_service([_req(1, 1, date(2026, 3, 16), date(2026, 3, 20), VacationStatus.PENDING)])

    with pytest.raises(ValidationError, match="already have a request"):
        service.request_vacation(1, start=date(2026, 3, 18), end=date(2026, 3, 25))
    with pytest.raises(ValidationError):
        service.request_vacation(1, start=date(2026, 4, 10), end=date(2026, 4, 9))
    with pytest.raises(ValidationError, match="Partial"):
        service.request_vacation(1, start=date(2026, 4, 6), end=date(2026, 4, 6), intensity="partial")
    with pytest.raises(ValidationError, match="no working days"):
        service.request_vacation(1, start=date(2026, 4, 4), end=date(2026, 4, 5))
    with pytest.raises(NotFoundError):
        service.request_vacation(99, start=date(2026, 4, 6), end=date(2026, 4, 6))


def test_request_cannot_exceed_available_minus_pending(make_service, employees):
    employees.update_fields(1, vacation_entitlement=5)
    service, _ = make_service([_req(1, 1, date(2026, 3, 16), date(2026, 3, 18), VacationStatus.PENDING)])

    with pytest.raises(ValidationError, match="Not enough vacation days"):
        service.request_vacation(1, start=date(2026, 4, 6), end=date(2026, 4, 8))

    assert service.request_vacation(1, start=date(2026, 4, 6), end=date(2026, 4, 7))


def test_absences_do_not_consume_entitlement(make_service, employees):
    employees.update_fields(1, vacation_entitlement=0)
    service, _ = make_service()

    rid = service.request_vacation(1, start=date(2026, 4, 6), end=date(2026, 4, 10), type="absence")

    assert rid
    assert service.stats(1).available == 0


def test_request_days_creates_one_request_per_date(make_service):
    service, vacations = make_service()

    ids = service.request_days(1, [date(2026, 3, 20), date(2026, 3, 16), date(2026, 3, 16)])

    assert len(ids) == 2
    assert [vacations.get_by_id(i).start_date for i in ids] == [date(2026, 3, 16), date(2026, 3, 20)]
    with pytest.raises(ValidationError):
        service.request_days(1, [])


def test_stats_split_pending_scheduled_taken_and_fixed(make_service):
    service, _ = make_service(
        [
            _req(1, 1, date(2026, 3, 2), date(2026, 3, 3), VacationStatus.APPROVED),
            _req(2, 1, date(2026, 3, 16), date(2026, 3, 18), VacationStatus.APPROVED),
            _req(3, 1, date(2026, 4, 6), date(2026, 4, 6), VacationStatus.PENDING),
            _req(4, 1, date(2026, 4, 7), date(2026, 4, 7), VacationStatus.REJECTED),
            _req(5, 1, date(2026, 4, 8), date(2026, 4, 8), VacationStatus.APPROVED, type=VacationType.ABSENCE),
        ],
        [
            Entitlement(
                1, None, "Company day", 1, 2026,
                usage_type=EntitlementUsage.FIXED, fixed_date=date(2026, 12, 24), scope=EntitlementScope.COLLECTIVE,
            )
        ],
    )

    stats = service.stats(1)

    assert stats.entitlement == 23
    assert stats.fixed == 1
    assert stats.taken == 2
    assert stats.scheduled == 3
    assert stats.pending == 1
    assert stats.available == 17


def test_cancel_rules(make_service):
    service, vacations = make_service(
        [
            _req(1, 1, date(2026, 3, 20), date(2026, 3, 20), VacationStatus.PENDING),
            _req(2, 1, date(2026, 3, 30), date(2026, 3, 31), VacationStatus.APPROVED),
            _req(3, 1, date(2026, 3, 10), date(2026, 3, 12), VacationStatus.APPROVED),
            _req(4, 2, date(2026, 3, 25), date(2026, 3, 25), VacationStatus.PENDING),
        ]
    )

    service.cancel(1, 1)
    service.cancel(1, 2)
    assert vacations.get_by_id(1).status == VacationStatus.CANCELLED
    assert vacations.get_by_id(2).status == VacationStatus.CANCELLED

    with pytest.raises(ValidationError):
        service.cancel(1, 3)
    with pytest.raises(AuthorizationError):
        service.cancel(1, 4)


def test_validate_pending_only(make_service):
    service, vacations = make_service([_req(1, 1, date(2026, 3, 20), date(2026, 3, 20), VacationStatus.PENDING)])

    service.validate(1, "approved", notes="  enjoy  ")

    assert vacations.get_by_id(1).status == VacationStatus.APPROVED
    assert vacations.get_by_id(1).admin_notes == "enjoy"
    with pytest.raises(ValidationError):
        service.validate(1, VacationStatus.REJECTED)
    with pytest.raises(ValidationError):
        service.validate(1, VacationStatus.CANCELLED)


def test_delete_request(make_service):
    service, vacations = make_service([_req(1, 1, date(2026, 3, 20), date(2026, 3, 20), VacationStatus.REJECTED)])

    service.delete(1)

    assert vacations.get_by_id(1) is None
    with pytest.raises(NotFoundError):
        service.delete(1)


def test_breakdown_synthesizes_base_item(make_service):
    service, _ = make_service()

    items = service.entitlement_breakdown(1, 2026)

    assert [(e.label, e.days, e.scope) for e in items] == [("Base", 22, EntitlementScope.INDIVIDUAL)]


def test_breakdown_keeps_stored_base(make_service):
    service, _ = make_service(entitlements=[Entitlement(7, 1, "Base 2026", 25, 2026)])

    items = service.entitlement_breakdown(1, 2026)

    assert [(e.entitlement_id, e.days) for e in items] == [(7, 25)]


def test_save_entitlements(make_service):
    service, _ = make_service()

    ids = service.save_entitlements(
        1,
        2026,
        [
            {"label": "Seniority", "days": 2},
            {"label": "Christmas Eve", "days": 1, "usage_type": "fixed", "fixed_date": "2026-12-24", "scope": "collective"},
        ],
    )

    items = {e.label: e for e in service.entitlement_breakdown(1, 2026)}
    assert len(ids) == 2
    assert items["Christmas Eve"].user_id is None
    assert items["Christmas Eve"].fixed_date == date(2026, 12, 24)
    assert items["Seniority"].user_id == 1
    assert items["Base"].days == 22

    with pytest.raises(ValidationError, match="need a date"):
        service.save_entitlements(1, 2026, [{"label": "Fixed", "days": 1, "usage_type": "fixed"}])
    with pytest.raises(ValidationError):
        service.save_entitlements(1, 2026, [{"label": "Negative", "days": -1}])

    service.delete_entitlement(ids[0])
    with pytest.raises(NotFoundError):
        service.delete_entitlement(ids[0])


def test_portal_data_marks_own_and_team_requests(make_service):
    service, _ = make_service(
        [
            _req(1, 1, date(2026, 3, 20), date(2026, 3, 20), VacationStatus.PENDING),
            _req(2, 2, date(2026, 3, 23), date(2026, 3, 24), VacationStatus.APPROVED, calendar_color="#FF0000"),
            _req(3, 2, date(2026, 3, 25), date(2026, 3, 25), VacationStatus.PENDING),
        ]
    )

    data = service.portal_data(1)

    by_id = {r["id"]: r for r in data["requests"]}
    assert set(by_id) == {1, 2}
    assert by_id[1]["is_own"] is True
    assert by_id[2]["is_own"] is False
    assert by_id[2]["calendar_color"] == "#FF0000"
    assert data["stats"]["pending"] == 1
    assert data["entitlements"][0]["label"] == "Base"


def test_team_coverage(make_service, employees, fixed_now):
    employees.update_fields(1, last_seen_at=fixed_now - timedelta(minutes=3), last_location_id=1)
    employees.update_fields(2, last_seen_at=fixed_now - timedelta(minutes=30), last_location_id=1)
    service, _ = make_service(
        [
            _req(1, 2, date(2026, 3, 11), date(2026, 3, 11), VacationStatus.PENDING),
            _req(2, 2, date(2026, 3, 9), date(2026, 3, 13), VacationStatus.APPROVED),
        ]
    )

    rows = {r.user_id: r for r in service.team_coverage()}

    assert rows[1].is_online is True
    assert rows[1].location_name == "Lisbon HQ"
    assert rows[1].vacation_status is None
    assert rows[2].is_online is False
    assert rows[2].vacation_status == VacationStatus.APPROVED
    assert rows[2].to_dict()["vacation_type"] == "vacation"


def test_team_coverage_uses_given_time(make_service, employees):
    employees.update_fields(1, last_seen_at=datetime(2026, 3, 11, 8, 0))
    service, _ = make_service()

    rows = {r.user_id: r for r in service.team_coverage(now=datetime(2026, 3, 11, 8, 5))}

    assert rows[1].is_online is True
