"""
fleetdesk/services/preview_service.py

Read-only analysis of a parsed sheet shown to operators before they import.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime
from typing import Any

from fleetdesk.domain.imports import EntityKind, ImportPreview, RowRecord
from fleetdesk.validators.dates import parse_calendar_date
from fleetdesk.validators.row_validator import ImportRowValidator, clean_text

_BOOLEAN_TEXT = {"true", "false"}


def build_preview(
    rows: Sequence[RowRecord],
    kind: EntityKind,
    validator: ImportRowValidator | None = None,
) -> ImportPreview:
    """
    Summarize ``rows`` without writing anything.

    Column types are inferred over non-blank values, first match wins in
    the order boolean, number, date, text. A column with no values at all
    is reported as text.
    """

    validator = validator or ImportRowValidator()
    problems = validator.validate(rows, kind)
    invalid = {problem.row for problem in problems}

    columns: dict[str, None] = {}
    for row in rows:
        for column in row.values:
            columns.setdefault(column, None)

    column_types: dict[str, str] = {}
    missing_values: dict[str, int] = {}
    for column in columns:
        values = [row.get(column) for row in rows]
        filled = [value for value in values if clean_text(value)]
        missing_values[column] = len(values) - len(filled)
        column_types[column] = _infer_type(filled)

    return ImportPreview(
        total_rows=len(rows),
        valid_rows=sum(1 for row in rows if row.source_row not in invalid),
        invalid_rows=sum(1 for row in rows if row.source_row in invalid),
        column_types=column_types,
        missing_values=missing_values,
        problems=problems,
    )


def _infer_type(values: list[Any]) -> str:
    if not values:
        return "text"
    if all(_is_boolean(value) for value in values):
        return "boolean"
    if all(_is_number(value) for value in values):
        return "number"
    if all(_is_date(value) for value in values):
        return "date"
    return "text"


def _is_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return True
    if isinstance(value, (int, float)):
        return value in (0, 1)
    return clean_text(value).lower() in _BOOLEAN_TEXT


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return True
    try:
        float(clean_text(value).replace(",", "."))
    except ValueError:
        return False
    return True


def _is_date(value: Any) -> bool:
    if isinstance(value, (date, datetime)):
        return True
    if not isinstance(value, str):
        return False
    return parse_calendar_date(value) is not None
