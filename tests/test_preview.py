from __future__ import annotations

from datetime import date

from fleetdesk.domain.imports import EntityKind, RowRecord
from fleetdesk.services.preview_service import build_preview


def test_preview_counts_types_and_problems() -> None:
    rows = [
        RowRecord(
            source_row=2,
            values={"PlateNumber": "ABC1234", "VehicleClass": "VAN", "Year": 2019, "HasTracker": "true", "Bought": date(2020, 1, 1)},
        ),
        RowRecord(
            source_row=3,
            values={"PlateNumber": "DEF5678", "VehicleClass": None, "Year": "2020", "HasTracker": 0, "Bought": "15/06/2021"},
        ),
    ]

    preview = build_preview(rows, EntityKind.VEHICLE)

    assert (preview.total_rows, preview.valid_rows, preview.invalid_rows) == (2, 1, 1)
    assert preview.column_types == {
        "PlateNumber": "text",
        "VehicleClass": "text",
        "Year": "number",
        "HasTracker": "boolean",
        "Bought": "date",
    }
    assert preview.missing_values["VehicleClass"] == 1
    assert preview.missing_values["PlateNumber"] == 0
    assert [(problem.row, problem.field) for problem in preview.problems] == [(3, "VehicleClass")]


def test_preview_of_columns_with_no_values() -> None:
    rows = [RowRecord(source_row=2, values={"Name": "ACME", "TaxId": "12345678000195", "Email": None})]

    preview = build_preview(rows, EntityKind.CUSTOMER)

    assert preview.column_types["Email"] == "text"
    assert preview.missing_values == {"Name": 0, "TaxId": 0, "Email": 1}
    assert preview.problems == []


def test_digit_text_is_a_number_not_a_boolean() -> None:
    rows = [
        RowRecord(source_row=2, values={"Flag": "1", "Active": 1}),
        RowRecord(source_row=3, values={"Flag": "0", "Active": "FALSE"}),
    ]

    preview = build_preview(rows, EntityKind.VEHICLE)

    assert preview.column_types["Flag"] == "number"
    assert preview.column_types["Active"] == "boolean"
