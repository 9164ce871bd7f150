from __future__ import annotations

from io import BytesIO

from openpyxl import load_workbook

from fleetdesk.domain.imports import EntityKind, ImportOutcome, OutcomeStatus, RowError
from fleetdesk.domain.templates import TEMPLATE_HEADERS
from fleetdesk.services.export_service import ImportExportService, build_template_workbook
from fleetdesk.services.summary import error_log_rows, summarize


def _outcomes() -> list[ImportOutcome]:
    return [
        ImportOutcome(row=2, status=OutcomeStatus.SUCCESS, entity_id=10),
        ImportOutcome(row=3, status=OutcomeStatus.FAILED, errors=("Name: Required value is missing.",)),
        ImportOutcome(
            row=4,
            status=OutcomeStatus.SUCCESS,
            entity_id=11,
            errors=("Address not saved: State not found: Atlantis",),
        ),
    ]


def test_summarize_counts_and_flattens_warnings() -> None:
    summary = summarize(_outcomes())

    assert (summary.total, summary.succeeded, summary.failed) == (3, 2, 1)
    assert summary.errors == (
        RowError(row=3, message="Name: Required value is missing."),
        RowError(row=4, message="Address not saved: State not found: Atlantis"),
    )
    assert [outcome.has_warnings for outcome in summary.outcomes] == [False, False, True]


def test_summarize_nothing() -> None:
    summary = summarize([])
    assert (summary.total, summary.succeeded, summary.failed, summary.errors) == (0, 0, 0, ())


def test_error_log_csv() -> None:
    service = ImportExportService()

    result = service.error_log(summarize(_outcomes()))
    text = service.to_csv(result)

    assert error_log_rows(summarize(_outcomes()))[0] == {"row": 3, "message": "Name: Required value is missing."}
    assert text.splitlines() == [
        "row,message",
        "3,Name: Required value is missing.",
        "4,Address not saved: State not found: Atlantis",
    ]


def test_error_log_xlsx() -> None:
    service = ImportExportService()

    content = service.to_xlsx(service.error_lines([RowError(row=5, message="Tax ID already registered.")]))

    sheet = load_workbook(BytesIO(content)).active
    assert sheet.title == "Errors"
    assert list(sheet.iter_rows(values_only=True)) == [("row", "message"), (5, "Tax ID already registered.")]


def test_template_workbooks_hold_only_the_header_row() -> None:
    for kind in EntityKind:
        sheet = load_workbook(BytesIO(build_template_workbook(kind))).active

        rows = list(sheet.iter_rows(values_only=True))
        assert sheet.title == "Template"
        assert rows == [TEMPLATE_HEADERS[kind]]
