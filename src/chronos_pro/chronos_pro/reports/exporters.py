from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import Sequence

import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

EXPORT_COLUMNS = ["full_name", "type", "timestamp", "location", "method", "status"]
PDF_HEADERS = ["Employee", "Type", "Date/Time", "Location", "Method", "Status"]
SHEET_NAME = "Punches"

ACCENT = colors.HexColor("#00E5FF")


def to_csv(rows: Sequence[dict]) -> bytes:
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=EXPORT_COLUMNS, extrasaction="ignore")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return out.getvalue().encode("utf-8-sig")


def to_excel(rows: Sequence[dict]) -> bytes:
    df = pd.DataFrame(list(rows), columns=EXPORT_COLUMNS)
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=SHEET_NAME)
    return output.getvalue()


def to_pdf(rows: Sequence[dict], *, title: str, generated_at: datetime) -> bytes:
    styles = getSampleStyleSheet()
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=28,
        rightMargin=28,
        topMargin=28,
        bottomMargin=28,
        title=title,
    )

    content = [
        Paragraph("CHRONOS PRO", styles["Title"]),
        Paragraph(title.upper(), styles["Heading3"]),
        Paragraph(f"Generated at: {generated_at.strftime('%Y-%m-%d %H:%M')}", styles["Normal"]),
        Spacer(1, 12),
    ]

    body = [
        [
            Paragraph(str(r.get("full_name", "")), styles["BodyText"]),
            str(r.get("type", "")).upper(),
            str(r.get("timestamp", "")),
            Paragraph(str(r.get("location", "")), styles["BodyText"]),
            str(r.get("method", "")).upper(),
            str(r.get("status", "")).upper(),
        ]
        for r in rows
    ]
    tbl = Table([PDF_HEADERS] + body, repeatRows=1, colWidths=[120, 50, 95, 110, 60, 55])
    tbl.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), ACCENT),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.black),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 8),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.whitesmoke]),
            ]
        )
    )
    content.append(tbl)

    doc.build(content)
    return buf.getvalue()
