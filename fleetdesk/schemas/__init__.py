"""
fleetdesk/schemas package marker.
"""

from fleetdesk.schemas.imports import (
    ErrorLogExportRequest,
    ImportOutcomeResponse,
    ImportPreviewResponse,
    ImportSummaryResponse,
    RowErrorResponse,
    ValidationProblemResponse,
)

__all__ = [
    "ErrorLogExportRequest",
    "ImportOutcomeResponse",
    "ImportPreviewResponse",
    "ImportSummaryResponse",
    "RowErrorResponse",
    "ValidationProblemResponse",
]
