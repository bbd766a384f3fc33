from __future__ import annotations

import io
from datetime import date, datetime

import pandas as pd
import pytest

from fakes import FakeAttendanceRepo
from src.chronos_pro.chronos_pro.attendance.model import AttendanceLog
from src.chronos_pro.chronos_pro.core.enums import PunchMethod, PunchType
from src.chronos_pro.chronos_pro.core.exceptions import ValidationError
from src.chronos_pro.chronos_pro.reports import exporters
from src.chronos_pro.chronos_pro.reports.service import ReportService


@pytest.fixture
def service(clock):
    attendance = FakeAttendanceRepo(
        [
            AttendanceLog(1, 1, 1, PunchType.ENTRY, PunchMethod.FACE, datetime(2026, 3, 10, 9, 0)),
            AttendanceLog(2, 1, 1, PunchType.EXIT, PunchMethod.PIN, datetime(2026, 3, 10, 18, 0), is_valid=False),
            AttendanceLog(3, 2, None, PunchType.ENTRY, PunchMethod.MANUAL, datetime(2026, 3, 12, 9, 0)),
        ],
        names={1: "Ana Costa", 2: "Rui Lopes"},
        location_names={1: "Lisbon HQ"},
    )
    return ReportService(attendance, clock=clock)


def test_export_rows(service):
    rows = service.export_rows(start=date(2026, 3, 10), end=date(2026, 3, 10))

    assert rows == [
        {
            "full_name": "Ana Costa",
            "type": "entry",
            "timestamp": "2026-03-10 09:00:00",
            "location": "Lisbon HQ",
            "method": "face",
            "status": "valid",
        },
        {
            "full_name": "Ana Costa",
            "type": "exit",
            "timestamp": "2026-03-10 18:00:00",
            "location": "Lisbon HQ",
            "method": "pin",
            "status": "invalid",
        },
    ]
    assert service.export_rows(start=date(2026, 3, 1), end=date(2026, 3, 31), user_id=2)[0]["location"] == "-"
    with pytest.raises(ValidationError):
        service.export_rows(start=date(2026, 3, 31), end=date(2026, 3, 1))


def test_csv_export(service):
    export = service.export("csv", start=date(2026, 3, 1), end=date(2026, 3, 31))

    text = export.content.decode("utf-8-sig")
    assert export.mimetype == "text/csv"
    assert export.filename == "punches_20260301_20260331.csv"
    assert text.splitlines()[0] == ",".join(exporters.EXPORT_COLUMNS)
    assert len(text.splitlines()) == 4


def test_excel_export_is_readable(service):
    export = service.export("XLSX", start=date(2026, 3, 1), end=date(2026, 3, 31))

    df = pd.read_excel(io.BytesIO(export.content), sheet_name=exporters.SHEET_NAME, engine="openpyxl")
    assert list(df.columns) == exporters.EXPORT_COLUMNS
    assert df["full_name"].tolist() == ["Ana Costa", "Ana Costa", "Rui Lopes"]


def test_pdf_export(service):
    export = service.export("pdf", start=date(2026, 3, 1), end=date(2026, 3, 31), title="March")

    assert export.content.startswith(b"%PDF")
    assert export.mimetype == "application/pdf"


def test_pdf_export_with_no_rows():
    assert exporters.to_pdf([], title="Empty", generated_at=datetime(2026, 3, 11, 9, 30)).startswith(b"%PDF")


def test_unknown_format(service):
    with pytest.raises(ValidationError):
        service.export("docx", start=date(2026, 3, 1), end=date(2026, 3, 31))
