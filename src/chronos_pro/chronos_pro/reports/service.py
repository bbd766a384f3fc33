from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local
from ..core.exceptions import ValidationError
from . import exporters

FORMATS = {
    "csv": ("text/csv", "csv"),
    "xlsx": ("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet", "xlsx"),
    "pdf": ("application/pdf", "pdf"),
}


@dataclass(frozen=True)
class ExportFile:
    content: bytes
    mimetype: str
    filename: str


class ReportService:
    def __init__(self, attendance: AttendanceRepository, *, clock=now_local):
        self._attendance = attendance
        self._clock = clock

    def export_rows(self, *, start: date, end: date, user_id: Optional[int] = None) -> list[dict]:
        if end < start:
            raise ValidationError("End date must be on or after the start date")
        rows = self._attendance.get_report_rows(
            start=datetime.combine(start, datetime.min.time()),
            end=datetime.combine(end + timedelta(days=1), datetime.min.time()),
            user_id=user_id,
        )
        return [
            {
                "full_name": r.full_name,
                "type": r.type.value,
                "timestamp": r.timestamp.strftime("%Y-%m-%d %H:%M:%S"),
                "location": r.location_name or "-",
                "method": r.method.value,
                "status": "valid" if r.is_valid else "invalid",
            }
            for r in rows
        ]

    def export(
        self,
        fmt: str,
        *,
        start: date,
        end: date,
        user_id: Optional[int] = None,
        title: str = "Punch report",
    ) -> ExportFile:
        fmt = (fmt or "").lower()
        if fmt not in FORMATS:
            raise ValidationError(f"Unsupported export format: {fmt!r}")

        rows = self.export_rows(start=start, end=end, user_id=user_id)
        if fmt == "csv":
            content = exporters.to_csv(rows)
        elif fmt == "xlsx":
            content = exporters.to_excel(rows)
        else:
            content = exporters.to_pdf(rows, title=title, generated_at=self._clock())

        mimetype, ext = FORMATS[fmt]
        filename = f"punches_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.{ext}"
        return ExportFile(content=content, mimetype=mimetype, filename=filename)
