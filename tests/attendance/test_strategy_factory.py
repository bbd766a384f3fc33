from datetime import datetime, time

from src.chronos_pro.chronos_pro.attendance.factory import PunchStrategyFactory
from src.chronos_pro.chronos_pro.attendance.strategies.late_strategy import LateStrategy
from src.chronos_pro.chronos_pro.attendance.strategies.on_time_strategy import OnTimeStrategy


def test_factory_first_entry_on_time(make_profile):
    profile = make_profile(work_start=time(9, 0))
    now = datetime(2026, 3, 11, 8, 59, 0)

    strategy = PunchStrategyFactory().for_entry(now=now, profile=profile, first_of_day=True)

    assert isinstance(strategy, OnTimeStrategy)
    assert strategy.decide_entry(now=now, profile=profile).is_late is False


def test_factory_first_entry_late(make_profile):
    profile = make_profile(work_start=time(9, 0))
    now = datetime(2026, 3, 11, 9, 1, 0)

    strategy = PunchStrategyFactory().for_entry(now=now, profile=profile, first_of_day=True)

    assert isinstance(strategy, LateStrategy)
    decision = strategy.decide_entry(now=now, profile=profile)
    assert decision.is_late is True
    assert "09:00" in decision.note


def test_factory_respects_grace_minutes(make_profile):
    profile = make_profile(work_start=time(9, 0))
    now = datetime(2026, 3, 11, 9, 4, 59)

    strategy = PunchStrategyFactory(grace_minutes=5).for_entry(now=now, profile=profile, first_of_day=True)

    assert isinstance(strategy, OnTimeStrategy)


def test_factory_later_entries_and_missing_hours_are_never_late(make_profile):
    now = datetime(2026, 3, 11, 14, 0, 0)

    after_lunch = PunchStrategyFactory().for_entry(now=now, profile=make_profile(), first_of_day=False)
    no_hours = PunchStrategyFactory().for_entry(now=now, profile=make_profile(work_start=None), first_of_day=True)

    assert isinstance(after_lunch, OnTimeStrategy)
    assert isinstance(no_hours, OnTimeStrategy)
