"""
fleetdesk/schemas/imports.py

Request and response schemas for spreadsheet import endpoints.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class ValidationProblemResponse(BaseModel):
    """
    API response model for one field-level validation problem.
    """

    row: int = Field(..., ge=1)
    field: str
    message: str


class RowErrorResponse(BaseModel):
    row: int = Field(..., ge=1)
    message: str


class ImportOutcomeResponse(BaseModel):
    """
    API response model for the result of one imported row.
    """

    row: int = Field(..., ge=1)
    status: Literal["success", "failed"]
    entity_id: int | None = None
    errors: list[str] = Field(default_factory=list)


class ImportSummaryResponse(BaseModel):
    """
    API response model for a finished import run.

    ``errors`` is capped; ``errors_truncated`` tells whether messages were
    left out.
    """

    kind: str
    total: int = Field(..., ge=0)
    succeeded: int = Field(..., ge=0)
    failed: int = Field(..., ge=0)
    outcomes: list[ImportOutcomeResponse] = Field(default_factory=list)
    errors: list[RowErrorResponse] = Field(default_factory=list)
    errors_truncated: bool = False


class ImportPreviewResponse(BaseModel):
    kind: str
    total_rows: int = Field(..., ge=0)
    valid_rows: int = Field(..., ge=0)
    invalid_rows: int = Field(..., ge=0)
    column_types: dict[str, str] = Field(default_factory=dict)
    missing_values: dict[str, int] = Field(default_factory=dict)
    problems: list[ValidationProblemResponse] = Field(default_factory=list)


class ErrorLogExportRequest(BaseModel):
    """
    Error lines posted back by the client to download them as a file.
    """

    errors: list[RowErrorResponse] = Field(default_factory=list)
