"""CSV and PDF rendering of timesheet result sets.

Both renderers are pure functions of a sequence of ``ExportRow`` values, so
the same code serves single-record downloads, full exports and filtered
exports.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Sequence
from dataclasses import astuple, dataclass
from typing import TYPE_CHECKING

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfgen import canvas
from sqlalchemy import inspect

if TYPE_CHECKING:
    from timesheet_tracker.models import Timesheet


CSV_MEDIA_TYPE = "text/csv"
PDF_MEDIA_TYPE = "application/pdf"

# Standard fonts only cover WinAnsi text; CJK lines fall back to a CID font
BODY_FONT = "Helvetica"
TITLE_FONT = "Helvetica-Bold"
CJK_FONT = "STSong-Light"


@dataclass(frozen=True)
class ExportRow:
    """Flattened timesheet with the owner's identity columns."""

    employee_name: str
    employee_email: str
    employee_id: str
    department: str
    date: str
    planned_work: str
    actual_work: str
    remarks: str
    status: str
    admin_comments: str

    @classmethod
    def from_timesheet(cls, timesheet: Timesheet) -> ExportRow:
        """Build a row, preferring the joined employee over the stored name."""
        state = inspect(timesheet)
        employee = None if "employee" in state.unloaded else timesheet.employee
        return cls(
            employee_name=(employee.name if employee else None) or timesheet.employee_name,
            employee_email=(employee.email if employee else None) or "",
            employee_id=(employee.employee_number if employee else None) or "",
            department=(employee.department if employee else None) or "",
            date=timesheet.work_date.isoformat(),
            planned_work=timesheet.planned_work or "",
            actual_work=timesheet.actual_work or "",
            remarks=timesheet.remarks or "",
            status=timesheet.status,
            admin_comments=timesheet.admin_comments or "",
        )


CSV_COLUMNS: tuple[str, ...] = (
    "employeeName",
    "employeeEmail",
    "employeeId",
    "department",
    "date",
    "plannedWork",
    "actualWork",
    "remarks",
    "status",
    "adminComments",
)

PDF_LABELS: tuple[str, ...] = (
    "Employee Name",
    "Employee Email",
    "Employee ID",
    "Department",
    "Date",
    "Planned Work",
    "Actual Work",
    "Remarks",
    "Status",
    "Admin Comments",
)


def to_rows(timesheets: Iterable[Timesheet]) -> list[ExportRow]:
    return [ExportRow.from_timesheet(ts) for ts in timesheets]


def render_csv(rows: Sequence[ExportRow]) -> str:
    """Render rows as CSV text with a header line."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_COLUMNS)
    for row in rows:
        writer.writerow(astuple(row))
    return buffer.getvalue()


def pdf_lines(rows: Sequence[ExportRow], title: str) -> list[str]:
    """Text lines of the PDF body: title, then one labelled block per row."""
    lines = [title, ""]
    for index, row in enumerate(rows, start=1):
        lines.append(f"Entry #{index}")
        for label, value in zip(PDF_LABELS, astuple(row)):
            lines.append(f"{label}: {value or '-'}")
        lines.append("")
    return lines


def font_for(text: str, latin_font: str = BODY_FONT) -> str:
    """Font able to draw ``text``: ``latin_font`` when possible, else the CJK font."""
    try:
        text.encode("cp1252")
        return latin_font
    except UnicodeEncodeError:
        if CJK_FONT not in pdfmetrics.getRegisteredFontNames():
            pdfmetrics.registerFont(UnicodeCIDFont(CJK_FONT))
        return CJK_FONT


def render_pdf(rows: Sequence[ExportRow], title: str = "Timesheet Report") -> bytes:
    """Render rows as a paginated PDF document."""
    buffer = io.BytesIO()
    page_width, page_height = A4
    margin = 20 * mm
    line_height = 14
    usable_width = page_width - 2 * margin

    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.setTitle(title)
    y = page_height - margin

    def next_line() -> None:
        nonlocal y
        y -= line_height
        if y < margin:
            pdf.showPage()
            y = page_height - margin

    pdf.setFont(font_for(title, TITLE_FONT), 18)
    pdf.drawCentredString(page_width / 2, y, title)
    y -= line_height

    for line in pdf_lines(rows, title)[1:]:
        if not line:
            next_line()
            continue
        font = font_for(line)
        for chunk in simpleSplit(line, font, 11, usable_width) or [""]:
            pdf.setFont(font, 11)
            pdf.drawString(margin, y, chunk)
            next_line()

    pdf.save()
    return buffer.getvalue()
