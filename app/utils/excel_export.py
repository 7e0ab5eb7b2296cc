from __future__ import annotations
from typing import List, Dict, Any
from io import BytesIO
from datetime import datetime

from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.styles import Font, Alignment

from app.utils.timeslots import day_label

HEADERS = ["day", "start_time", "end_time", "subject", "class", "teacher", "room"]


def entry_rows(entries) -> List[Dict[str, Any]]:
    """
    entries: TimetableEntryOut list, already in (day, start_time) order
    """
    return [
        {
            "day": day_label(e.day_of_week),
            "start_time": e.start_time,
            "end_time": e.end_time,
            "subject": e.subject,
            "class": e.class_name or (str(e.class_id) if e.class_id is not None else None),
            "teacher": e.teacher_name or (str(e.teacher_id) if e.teacher_id is not None else None),
            "room": e.room,
        }
        for e in entries
    ]


def timetable_to_xlsx_bytes(rows: List[Dict[str, Any]], sheet_name: str = "Timetable") -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name[:31]

    ws.append(HEADERS)

    # header style
    header_font = Font(bold=True)
    for col_idx, _h in enumerate(HEADERS, start=1):
        cell = ws.cell(row=1, column=col_idx)
        cell.font = header_font
        cell.alignment = Alignment(horizontal="center", vertical="center")

    for r in rows:
        ws.append([r.get(h) for h in HEADERS])

    # autosize columns
    for col_idx, h in enumerate(HEADERS, start=1):
        max_len = len(h)
        for row_idx in range(2, ws.max_row + 1):
            v = ws.cell(row=row_idx, column=col_idx).value
            if v is None:
                continue
            max_len = max(max_len, len(str(v)))
        ws.column_dimensions[get_column_letter(col_idx)].width = min(max_len + 2, 60)

    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


def make_filename(prefix: str = "timetable") -> str:
    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"{prefix}_{ts}.xlsx"
