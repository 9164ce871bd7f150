"""
fleetdesk/api/routers/imports.py

Spreadsheet import HTTP endpoints.

GET  /imports/{kind}/template        empty workbook with the header row
POST /imports/{kind}/preview         analysis of an upload, nothing written
POST /imports/{kind}                 run the import, per-row outcomes
POST /imports/errors/export          error lines as a csv or xlsx download

Row-level failures are part of the 200 response. Only an unreadable or
empty workbook turns into an HTTP error.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, UploadFile, status

from fleetdesk.api.dependencies import (
    get_import_service,
    get_tenant_id,
    get_workbook_upload,
    read_upload_content,
)
from fleetdesk.config import get_import_settings
from fleetdesk.domain.imports import EntityKind, ImportOutcome, ImportSummary, RowError
from fleetdesk.ingestion.workbook_parser import WorkbookParseError, read_first_sheet
from fleetdesk.schemas.imports import (
    ErrorLogExportRequest,
    ImportOutcomeResponse,
    ImportPreviewResponse,
    ImportSummaryResponse,
    RowErrorResponse,
    ValidationProblemResponse,
)
from fleetdesk.services.export_service import (
    ImportExportService,
    build_template_workbook,
    get_import_export_service,
)
from fleetdesk.services.import_service import EntityImportService
from fleetdesk.services.preview_service import build_preview

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/imports", tags=["imports"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
_VALID_FORMATS = frozenset({"csv", "xlsx"})


def _attachment(content: bytes | str, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _outcome_response(outcome: ImportOutcome) -> ImportOutcomeResponse:
    return ImportOutcomeResponse(
        row=outcome.row,
        status=outcome.status.value,
        entity_id=outcome.entity_id,
        errors=list(outcome.errors),
    )


def _summary_response(kind: EntityKind, summary: ImportSummary) -> ImportSummaryResponse:
    limit = get_import_settings().max_reported_errors
    return ImportSummaryResponse(
        kind=kind.value,
        total=summary.total,
        succeeded=summary.succeeded,
        failed=summary.failed,
        outcomes=[_outcome_response(outcome) for outcome in summary.outcomes],
        errors=[RowErrorResponse(row=error.row, message=error.message) for error in summary.errors[:limit]],
        errors_truncated=len(summary.errors) > limit,
    )


@router.post("/errors/export", summary="Download an import error log")
def export_error_log(
    payload: ErrorLogExportRequest,
    output_format: str = Query(default="csv", description='Output format: "csv" or "xlsx".'),
    service: ImportExportService = Depends(get_import_export_service),
) -> Response:
    if output_format not in _VALID_FORMATS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid format {output_format!r}. Must be one of: {sorted(_VALID_FORMATS)}.",
        )

    errors = tuple(RowError(row=error.row, message=error.message) for error in payload.errors)
    result = service.error_lines(errors)
    if output_format == "csv":
        return _attachment(service.to_csv(result), "text/csv; charset=utf-8", "import_errors.csv")
    return _attachment(service.to_xlsx(result), XLSX_MEDIA_TYPE, "import_errors.xlsx")


@router.get("/{kind}/template", summary="Download the import template")
def download_template(kind: EntityKind) -> Response:
    return _attachment(build_template_workbook(kind), XLSX_MEDIA_TYPE, f"{kind.value}_import_template.xlsx")


@router.post("/{kind}/preview", response_model=ImportPreviewResponse)
def preview_import(
    kind: EntityKind,
    file: UploadFile = Depends(get_workbook_upload),
) -> ImportPreviewResponse:
    """
    Parse an upload and report column types, missing values and validation
    problems without importing anything.
    """

    content = read_upload_content(file)
    try:
        rows = read_first_sheet(content)
    except WorkbookParseError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    preview = build_preview(rows, kind)
    return ImportPreviewResponse(
        kind=kind.value,
        total_rows=preview.total_rows,
        valid_rows=preview.valid_rows,
        invalid_rows=preview.invalid_rows,
        column_types=preview.column_types,
        missing_values=preview.missing_values,
        problems=[
            ValidationProblemResponse(row=problem.row, field=problem.field, message=problem.message)
            for problem in preview.problems
        ],
    )


@router.post("/{kind}", response_model=ImportSummaryResponse)
def run_import(
    kind: EntityKind,
    file: UploadFile = Depends(get_workbook_upload),
    rows: list[int] | None = Query(
        default=None,
        description="Sheet row numbers to import; all rows when omitted.",
    ),
    tenant_id: int = Depends(get_tenant_id),
    service: EntityImportService = Depends(get_import_service),
) -> ImportSummaryResponse:
    """
    Import every (or every selected) row of the first sheet of an upload.
    """

    content = read_upload_content(file)
    try:
        summary = service.import_workbook(content, kind, tenant_id=tenant_id, selected_rows=rows)
    except WorkbookParseError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    logger.info(
        "Import request finished kind=%s tenant=%s total=%d failed=%d",
        kind.value,
        tenant_id,
        summary.total,
        summary.failed,
    )
    return _summary_response(kind, summary)
