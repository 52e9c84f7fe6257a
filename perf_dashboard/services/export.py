"""
Spreadsheet export of entries.

Writes the raw entry list (newest first) and the per-consultant totals of
the selected window into an in-memory .xlsx workbook.
"""

import datetime as dt
from io import BytesIO
from typing import Iterable, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font

from ..schemas import COUNT_FIELDS, COUNT_LABELS, Aggregate, Entry

ENTRY_HEADERS = ["ID", "Consultant", "Date", "Week", "Month", "Year"] + [
    COUNT_LABELS[f] for f in COUNT_FIELDS
] + ["Created at (UTC)"]


def export_workbook(
    entries: Iterable[Entry],
    per_consultant: Sequence[Aggregate],
    total: Aggregate,
    period_label: str,
) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Entries"
    ws.append(ENTRY_HEADERS)
    for e in entries:
        ws.append(
            [e.id, e.name, e.date, e.week, e.month, e.year]
            + [getattr(e, f) for f in COUNT_FIELDS]
            + [_naive_utc(e.created_at)]
        )

    totals = wb.create_sheet("Totals")
    totals.append([period_label])
    totals.append(["Consultant"] + [COUNT_LABELS[f] for f in COUNT_FIELDS])
    for agg in list(per_consultant) + [total]:
        totals.append([agg.name] + [getattr(agg, f) for f in COUNT_FIELDS])

    for row in (ws[1], totals[2]):
        for cell in row:
            cell.font = Font(bold=True)
    totals["A1"].font = Font(bold=True, size=13)
    totals.cell(row=totals.max_row, column=1).value = "Total"

    buf = BytesIO()
    wb.save(buf)
    return buf.getvalue()


def _naive_utc(ts: dt.datetime) -> dt.datetime:
    # Excel cannot store timezone-aware datetimes
    if ts.tzinfo is not None:
        ts = ts.astimezone(dt.timezone.utc)
    return ts.replace(tzinfo=None)
