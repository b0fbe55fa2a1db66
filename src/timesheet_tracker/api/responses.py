"""File download responses."""

from urllib.parse import quote

from fastapi import Response

from timesheet_tracker.services.export import (
    CSV_MEDIA_TYPE,
    PDF_MEDIA_TYPE,
    ExportRow,
    render_csv,
    render_pdf,
)


def attachment(content: bytes | str, media_type: str, filename: str) -> Response:
    """Response that browsers save as ``filename``."""
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{quote(filename)}"'},
    )


def csv_attachment(rows: list[ExportRow], filename: str) -> Response:
    return attachment(render_csv(rows), CSV_MEDIA_TYPE, filename)


def pdf_attachment(rows: list[ExportRow], filename: str, title: str) -> Response:
    return attachment(render_pdf(rows, title=title), PDF_MEDIA_TYPE, filename)
