"""
tests/test_imports_router.py

HTTP contract of the import endpoints, served from a bare FastAPI app
bound to the SQLite test session.
"""

from __future__ import annotations

from collections.abc import Iterator
from io import BytesIO

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from openpyxl import load_workbook
from sqlalchemy import select
from sqlalchemy.orm import Session

from db.models import Driver
from db.session import get_db
from fleetdesk.api.routers import imports_router

XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
TENANT_HEADER = {"X-Organization-Id": "3"}


@pytest.fixture()
def client(session: Session) -> Iterator[TestClient]:
    application = FastAPI()
    application.include_router(imports_router)

    def _get_db() -> Iterator[Session]:
        yield session

    application.dependency_overrides[get_db] = _get_db
    with TestClient(application) as test_client:
        yield test_client


def _upload(content: bytes, filename: str = "drivers.xlsx") -> dict:
    return {"file": (filename, content, XLSX)}


def test_template_download(client) -> None:
    response = client.get("/imports/customer/template")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith(XLSX)
    assert "customer_import_template.xlsx" in response.headers["content-disposition"]
    sheet = load_workbook(BytesIO(response.content)).active
    assert next(sheet.iter_rows(values_only=True)) == ("Name", "TaxId", "Email", "Phone")


def test_unknown_kind_is_rejected(client) -> None:
    assert client.get("/imports/trucks/template").status_code == 422


def test_preview_writes_nothing(client, session, build_workbook) -> None:
    content = build_workbook(["Name", "NationalId"], [["Ana Souza", "11111111111"], ["", "1"]])

    response = client.post("/imports/driver/preview", files=_upload(content))

    assert response.status_code == 200
    body = response.json()
    assert (body["total_rows"], body["valid_rows"], body["invalid_rows"]) == (2, 1, 1)
    assert {problem["field"] for problem in body["problems"]} == {"Name", "NationalId"}
    assert session.scalars(select(Driver)).all() == []


def test_import_requires_tenant_header(client, build_workbook) -> None:
    content = build_workbook(["Name", "NationalId"], [["Ana Souza", "11111111111"]])

    missing = client.post("/imports/driver", files=_upload(content))
    invalid = client.post("/imports/driver", files=_upload(content), headers={"X-Organization-Id": "abc"})

    assert missing.status_code == 400
    assert invalid.status_code == 400


def test_import_run(client, session, build_workbook) -> None:
    content = build_workbook(
        ["Name", "NationalId"],
        [["Ana Souza", "11111111111"], ["", "22222222222"], ["Carla Dias", "33333333333"]],
    )

    response = client.post("/imports/driver", files=_upload(content), headers=TENANT_HEADER)

    assert response.status_code == 200
    body = response.json()
    assert (body["total"], body["succeeded"], body["failed"]) == (3, 2, 1)
    assert body["errors"] == [{"row": 3, "message": "Name: Required value is missing."}]
    assert body["errors_truncated"] is False
    assert [outcome["status"] for outcome in body["outcomes"]] == ["success", "failed", "success"]
    assert {driver.organization_id for driver in session.scalars(select(Driver))} == {3}


def test_import_selected_rows(client, build_workbook) -> None:
    content = build_workbook(
        ["Name", "NationalId"],
        [["Ana Souza", "11111111111"], ["Bruno Reis", "22222222222"]],
    )

    response = client.post("/imports/driver?rows=3", files=_upload(content), headers=TENANT_HEADER)

    assert [outcome["row"] for outcome in response.json()["outcomes"]] == [3]


def test_unreadable_workbook(client) -> None:
    response = client.post("/imports/vehicle", files=_upload(b"not a workbook"), headers=TENANT_HEADER)

    assert response.status_code == 400


def test_non_spreadsheet_upload(client) -> None:
    response = client.post(
        "/imports/vehicle",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=TENANT_HEADER,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Only .xlsx spreadsheets are allowed."


def test_error_log_export(client) -> None:
    payload = {"errors": [{"row": 4, "message": "Plate number already registered."}]}

    as_csv = client.post("/imports/errors/export", json=payload)
    as_xlsx = client.post("/imports/errors/export?output_format=xlsx", json=payload)
    bad = client.post("/imports/errors/export?output_format=pdf", json=payload)

    assert as_csv.status_code == 200
    assert as_csv.text.splitlines() == ["row,message", "4,Plate number already registered."]
    assert as_xlsx.headers["content-type"].startswith(XLSX)
    assert bad.status_code == 400


def test_legacy_xls_upload_is_rejected(client) -> None:
    response = client.post(
        "/imports/driver",
        files={"file": ("drivers.xls", b"\xd0\xcf\x11\xe0", "application/vnd.ms-excel")},
        headers=TENANT_HEADER,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Only .xlsx spreadsheets are allowed."
