"""
fleetdesk/services package marker.
"""

from fleetdesk.services.address_resolver import (
    AddressDependencyError,
    AddressHierarchyResolver,
    AddressLevelError,
    AddressNotFoundError,
    AddressResolutionError,
)
from fleetdesk.services.export_service import (
    ExportResult,
    ImportExportService,
    build_template_workbook,
    get_import_export_service,
)
from fleetdesk.services.import_service import EntityImportService, build_import_service
from fleetdesk.services.preview_service import build_preview
from fleetdesk.services.summary import error_log_rows, summarize

__all__ = [
    "AddressDependencyError",
    "AddressHierarchyResolver",
    "AddressLevelError",
    "AddressNotFoundError",
    "AddressResolutionError",
    "EntityImportService",
    "ExportResult",
    "ImportExportService",
    "build_import_service",
    "build_preview",
    "build_template_workbook",
    "error_log_rows",
    "get_import_export_service",
    "summarize",
]
