"""
fleetdesk/ingestion package marker.
"""

from fleetdesk.ingestion.workbook_parser import (
    EmptyWorkbookError,
    OpenpyxlWorkbookParser,
    ParsedWorkbook,
    TabularParser,
    WorkbookParseError,
    read_first_sheet,
)

__all__ = [
    "EmptyWorkbookError",
    "OpenpyxlWorkbookParser",
    "ParsedWorkbook",
    "TabularParser",
    "WorkbookParseError",
    "read_first_sheet",
]
