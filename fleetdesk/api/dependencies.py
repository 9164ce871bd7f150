"""
fleetdesk/api/dependencies.py

Shared FastAPI dependencies for request validation.
"""

from __future__ import annotations

from fastapi import Depends, File, Header, HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from db.session import get_db
from fleetdesk.config import get_upload_settings
from fleetdesk.services.import_service import EntityImportService, build_import_service

WORKBOOK_EXTENSIONS = (".xlsx",)
WORKBOOK_CONTENT_TYPES = {
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


def get_workbook_upload(file: UploadFile = File(...)) -> UploadFile:
    """
    Validate that the uploaded file is a spreadsheet by extension or MIME type.
    """

    filename = (file.filename or "").strip().lower()
    content_type = (file.content_type or "").strip().lower()

    is_workbook_filename = filename.endswith(WORKBOOK_EXTENSIONS)
    is_workbook_content_type = content_type in WORKBOOK_CONTENT_TYPES

    if not is_workbook_filename and not is_workbook_content_type:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only .xlsx spreadsheets are allowed.",
        )

    return file


def read_upload_content(file: UploadFile) -> bytes:
    """
    Read the whole upload, rejecting files above the configured size limit.
    """

    max_bytes = get_upload_settings().max_bytes
    try:
        content = file.file.read(max_bytes + 1)
    finally:
        file.file.close()
    if len(content) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Spreadsheet exceeds the {max_bytes} byte upload limit.",
        )
    return content


def get_tenant_id(
    organization_id: str | None = Header(default=None, alias="X-Organization-Id"),
) -> int:
    """
    Read the organization the request acts for from the X-Organization-Id header.
    """

    raw_value = (organization_id or "").strip()
    if not raw_value:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Organization-Id header is required.",
        )
    try:
        tenant_id = int(raw_value)
    except ValueError:
        tenant_id = 0
    if tenant_id <= 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="X-Organization-Id must be a positive integer.",
        )
    return tenant_id


def get_import_service(db: Session = Depends(get_db)) -> EntityImportService:
    """
    Build the import service for the request's database session.
    """

    return build_import_service(db)
