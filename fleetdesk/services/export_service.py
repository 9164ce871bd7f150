"""
fleetdesk/services/export_service.py

Tabular exports around the import flow: the downloadable error log of a
finished run and the empty import templates.

Both CSV and xlsx renderings work from the same flat ``ExportResult``.
"""

from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from collections.abc import Iterable
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Font

from fleetdesk.domain.imports import EntityKind, ImportSummary, RowError
from fleetdesk.domain.templates import template_headers
from fleetdesk.services.summary import error_log_rows

ERROR_LOG_FIELDS: list[str] = ["row", "message"]
TEMPLATE_SHEET_TITLE = "Template"


# ---------------------------------------------------------------------------
# Export result container
# ---------------------------------------------------------------------------


@dataclass
class ExportResult:
    """
    Flat tabular data ready for CSV or xlsx serialisation.

    rows:   One dict per row.
    fields: Ordered column names.
    """

    rows: list[dict[str, Any]] = field(default_factory=list)
    fields: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class ImportExportService:
    def error_log(self, summary: ImportSummary) -> ExportResult:
        return ExportResult(rows=error_log_rows(summary), fields=list(ERROR_LOG_FIELDS))

    def error_lines(self, errors: Iterable[RowError]) -> ExportResult:
        """
        Build the error log from lines the client sends back, e.g. after it
        has filtered the summary it was given.
        """

        rows = [{"row": error.row, "message": error.message} for error in errors]
        return ExportResult(rows=rows, fields=list(ERROR_LOG_FIELDS))

    def to_csv(self, result: ExportResult) -> str:
        buf = io.StringIO()
        writer = csv.DictWriter(
            buf,
            fieldnames=result.fields,
            extrasaction="ignore",
            restval="",
            lineterminator="\r\n",
        )
        writer.writeheader()
        for row in result.rows:
            writer.writerow({key: ("" if value is None else value) for key, value in row.items()})
        return buf.getvalue()

    def to_xlsx(self, result: ExportResult, sheet_title: str = "Errors") -> bytes:
        """
        Render ``result`` as a one-sheet workbook with a bold header row.
        """

        workbook = Workbook()
        sheet = workbook.active
        sheet.title = sheet_title
        sheet.append(result.fields)
        for cell in sheet[1]:
            cell.font = Font(bold=True)
        for row in result.rows:
            sheet.append([row.get(name) for name in result.fields])
        return _save(workbook)


def build_template_workbook(kind: EntityKind) -> bytes:
    """
    Return an xlsx file whose only sheet holds the header row for ``kind``.
    """

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = TEMPLATE_SHEET_TITLE
    headers = template_headers(kind)
    sheet.append(list(headers))
    for index, cell in enumerate(sheet[1], start=1):
        cell.font = Font(bold=True)
        sheet.column_dimensions[cell.column_letter].width = max(12, len(headers[index - 1]) + 4)
    return _save(workbook)


def _save(workbook: Workbook) -> bytes:
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


_service: ImportExportService | None = None


def get_import_export_service() -> ImportExportService:
    global _service
    if _service is None:
        _service = ImportExportService()
    return _service
