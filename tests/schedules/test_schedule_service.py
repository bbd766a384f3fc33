from __future__ import annotations

from datetime import time

import pytest

from fakes import FakeScheduleRepo
from src.chronos_pro.chronos_pro.core.exceptions import ValidationError
from src.chronos_pro.chronos_pro.schedules.model import WorkSchedule
from src.chronos_pro.chronos_pro.schedules.service import ScheduleService, copy_day, parse_schedule_row


def _row(dow, *pairs):
    row = {"day_of_week": dow}
    for i, (start, end) in enumerate(pairs, start=1):
        row[f"pair_{i}_start"] = start
        row[f"pair_{i}_end"] = end
    return row


def test_get_matrix_always_has_seven_days():
    repo = FakeScheduleRepo([WorkSchedule(5, 1, ((time(9), time(13)), (time(14), time(18)), (None, None), (None, None)))])

    matrix = ScheduleService(repo).get_matrix(5)

    assert [r["day_of_week"] for r in matrix] == list(range(7))
    assert matrix[0]["day_name"] == "Sunday"
    assert matrix[1]["pair_1_start"] == "09:00"
    assert matrix[1]["pair_2_end"] == "18:00"
    assert matrix[2]["pair_1_start"] == ""


def test_save_matrix_upserts_each_day():
    repo = FakeScheduleRepo()
    service = ScheduleService(repo)

    saved = service.save_matrix(5, [_row(1, ("09:00", "13:00"), ("14:00", "18:00")), _row(6)])

    assert saved == 2
    monday, saturday = repo.list_for_user(5)
    assert monday.worked_minutes == 480
    assert saturday.has_work is False


@pytest.mark.parametrize(
    "row",
    [
        _row(1, ("09:00", "")),
        _row(1, ("13:00", "09:00")),
        _row(1, ("09:00", "13:00"), ("12:00", "18:00")),
        _row(7, ("09:00", "13:00")),
        {"pair_1_start": "09:00"},
        _row(1, ("9h", "13:00")),
    ],
)
def test_invalid_rows_are_rejected(row):
    with pytest.raises(ValidationError):
        parse_schedule_row(5, row)


def test_pairs_may_be_listed_out_of_order_if_they_do_not_overlap():
    schedule = parse_schedule_row(5, _row(2, ("14:00", "18:00"), ("09:00", "13:00")))

    assert schedule.worked_minutes == 480


def test_duplicate_days_are_rejected():
    with pytest.raises(ValidationError, match="Duplicate"):
        ScheduleService(FakeScheduleRepo()).save_matrix(5, [_row(1), _row(1)])


def test_copy_day_copies_monday_to_targets():
    matrix = [_row(d) for d in range(7)]
    matrix[1] = _row(1, ("08:00", "12:00"), ("13:00", "17:00"))

    rows = copy_day(matrix, [2, 3, 1])

    assert rows[2]["pair_1_start"] == "08:00"
    assert rows[3]["pair_2_end"] == "17:00"
    assert "pair_1_start" not in rows[4]
    # input untouched
    assert "pair_1_start" not in matrix[2]


def test_copy_day_needs_source_row():
    with pytest.raises(ValidationError):
        copy_day([_row(2)], [3])
