"""
fleetdesk/domain package marker.
"""

from fleetdesk.domain.imports import (
    AddressInput,
    CustomerRow,
    DriverRow,
    EntityKind,
    ImportOutcome,
    ImportPreview,
    ImportSummary,
    OutcomeStatus,
    RowError,
    RowRecord,
    ValidationProblem,
    VehicleDetails,
    VehicleRow,
)

__all__ = [
    "AddressInput",
    "CustomerRow",
    "DriverRow",
    "EntityKind",
    "ImportOutcome",
    "ImportPreview",
    "ImportSummary",
    "OutcomeStatus",
    "RowError",
    "RowRecord",
    "ValidationProblem",
    "VehicleDetails",
    "VehicleRow",
]
