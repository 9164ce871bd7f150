"""
fleetdesk/domain/imports.py

Domain models used by the spreadsheet import flow.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Mapping


class EntityKind(str, Enum):
    DRIVER = "driver"
    CUSTOMER = "customer"
    VEHICLE = "vehicle"


class OutcomeStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class RowRecord:
    """
    One parsed spreadsheet row.

    source_row is the 1-based row number in the sheet; the header occupies
    row 1, so the first data row is 2.
    """

    source_row: int
    values: Mapping[str, Any]

    def get(self, column: str) -> Any:
        return self.values.get(column)


@dataclass(frozen=True)
class ValidationProblem:
    """
    One field-level problem found in a row before import.
    """

    row: int
    field: str
    message: str

    def describe(self) -> str:
        return f"{self.field}: {self.message}"


@dataclass(frozen=True)
class AddressInput:
    """
    Free-text address fields as given in a driver row.
    """

    street: str | None = None
    number: str | None = None
    complement: str | None = None
    postal_code: str | None = None
    neighborhood: str | None = None
    city: str | None = None
    state: str | None = None

    @property
    def is_resolvable(self) -> bool:
        return bool(self.street and self.city and self.state)


@dataclass(frozen=True)
class VehicleDetails:
    """
    Descriptive vehicle columns shared by driver and vehicle templates.
    """

    plate: str | None = None
    make: str = ""
    model: str = ""
    vehicle_class: str = ""
    year: str = ""
    fuel: str = ""
    weight: str = ""
    volume: str = ""
    color: str = ""
    has_tracker: bool = False
    tracker_make: str = ""


@dataclass(frozen=True)
class DriverRow:
    source_row: int
    name: str
    national_id: str
    role: str
    email: str | None = None
    phone: str | None = None
    birth_date: date | None = None
    gender: str | None = None
    address: AddressInput = field(default_factory=AddressInput)
    vehicle: VehicleDetails = field(default_factory=VehicleDetails)


@dataclass(frozen=True)
class CustomerRow:
    source_row: int
    name: str
    tax_id: str
    email: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class VehicleRow:
    source_row: int
    vehicle: VehicleDetails


@dataclass(frozen=True)
class ImportOutcome:
    """
    Result of importing one row.

    A successful outcome may still carry messages: they are warnings about
    enrichment steps (such as the address) that failed after the primary
    record was created.
    """

    row: int
    status: OutcomeStatus
    entity_id: int | None = None
    errors: tuple[str, ...] = ()

    @property
    def succeeded(self) -> bool:
        return self.status is OutcomeStatus.SUCCESS

    @property
    def has_warnings(self) -> bool:
        return self.succeeded and bool(self.errors)


@dataclass(frozen=True)
class RowError:
    """
    One flattened error line for the error log, keyed by spreadsheet row.
    """

    row: int
    message: str


@dataclass(frozen=True)
class ImportSummary:
    """
    End-of-run import summary.
    """

    total: int
    succeeded: int
    failed: int
    outcomes: tuple[ImportOutcome, ...] = ()
    errors: tuple[RowError, ...] = ()


@dataclass(frozen=True)
class ImportPreview:
    """
    Pre-import analysis of a parsed sheet. Nothing has been written.
    """

    total_rows: int
    valid_rows: int
    invalid_rows: int
    column_types: dict[str, str] = field(default_factory=dict)
    missing_values: dict[str, int] = field(default_factory=dict)
    problems: list[ValidationProblem] = field(default_factory=list)
