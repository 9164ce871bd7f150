"""
fleetdesk/ingestion/workbook_parser.py

Turns uploaded workbook bytes into ordered row records.

The first row of a sheet is the header; every following non-blank row
becomes one ``RowRecord`` keyed by header name and tagged with its sheet
row number.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from io import BytesIO
from typing import Any, Protocol
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from fleetdesk.domain.imports import RowRecord

logger = logging.getLogger(__name__)

HEADER_ROW = 1


class WorkbookParseError(ValueError):
    """
    Raised when uploaded bytes cannot be read as a workbook.
    """


class EmptyWorkbookError(WorkbookParseError):
    """
    Raised when the sheet to import has no header or no data rows.
    """


@dataclass(frozen=True)
class ParsedWorkbook:
    sheet_names: list[str]
    sheets: dict[str, list[RowRecord]] = field(default_factory=dict)

    def rows_of(self, sheet_name: str) -> list[RowRecord]:
        return list(self.sheets.get(sheet_name, []))

    def first_sheet_rows(self) -> list[RowRecord]:
        if not self.sheet_names:
            return []
        return self.rows_of(self.sheet_names[0])


class TabularParser(Protocol):
    def parse(self, content: bytes) -> ParsedWorkbook:
        ...


class OpenpyxlWorkbookParser:
    """
    Workbook parser backed by openpyxl (values only, formulas resolved to
    their cached results).
    """

    def parse(self, content: bytes) -> ParsedWorkbook:
        if not content:
            raise WorkbookParseError("Uploaded file is empty.")

        try:
            workbook = load_workbook(BytesIO(content), read_only=True, data_only=True)
        except (InvalidFileException, BadZipFile, KeyError, OSError, ValueError) as exc:
            raise WorkbookParseError(f"File could not be read as a workbook: {exc}") from exc

        try:
            sheets = {
                worksheet.title: self._read_sheet(worksheet.iter_rows(values_only=True))
                for worksheet in workbook.worksheets
            }
            return ParsedWorkbook(sheet_names=list(workbook.sheetnames), sheets=sheets)
        finally:
            workbook.close()

    def _read_sheet(self, raw_rows: Any) -> list[RowRecord]:
        headers: list[str | None] | None = None
        records: list[RowRecord] = []

        for row_number, values in enumerate(raw_rows, start=HEADER_ROW):
            if headers is None:
                headers = _header_names(values)
                continue
            if not any(_is_filled(value) for value in values):
                continue

            row: dict[str, Any] = {}
            for header, value in zip(headers, values):
                if header is None:
                    continue
                row[header] = _cell_value(value)
            records.append(RowRecord(source_row=row_number, values=row))

        return records


def read_first_sheet(content: bytes, parser: TabularParser | None = None) -> list[RowRecord]:
    """
    Parse ``content`` and return the data rows of its first sheet.

    Raises EmptyWorkbookError when that sheet has no data rows.
    """

    parsed = (parser or OpenpyxlWorkbookParser()).parse(content)
    rows = parsed.first_sheet_rows()
    if not rows:
        raise EmptyWorkbookError("The first sheet is empty or has no data rows.")
    logger.info(
        "Workbook parsed sheets=%d first_sheet=%r data_rows=%d",
        len(parsed.sheet_names),
        parsed.sheet_names[0],
        len(rows),
    )
    return rows


def _header_names(values: tuple[Any, ...]) -> list[str | None]:
    names: list[str | None] = []
    seen: dict[str, int] = {}
    for value in values:
        text = "" if value is None else str(value).strip()
        if not text:
            names.append(None)
            continue
        count = seen.get(text, 0)
        seen[text] = count + 1
        names.append(text if count == 0 else f"{text}_{count}")
    return names


def _is_filled(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _cell_value(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and not value.strip():
        return None
    return value
