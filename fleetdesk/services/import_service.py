"""
fleetdesk/services/import_service.py

Service layer for spreadsheet imports of drivers, customers and vehicles.

Rows are imported one at a time in sheet order. Each row goes through the
validation gate, then creates its primary record and finally its dependent
records (address link, owned vehicle). There is no batch transaction: every
store call commits on its own, so a failing row never undoes an earlier
one, and a failure in a dependent step never undoes the primary record of
the same row.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Sequence
from datetime import date
from typing import Any

from sqlalchemy.orm import Session

from db.models.driver import DriverRole
from fleetdesk.config import get_import_settings
from fleetdesk.domain.imports import (
    AddressInput,
    CustomerRow,
    DriverRow,
    EntityKind,
    ImportOutcome,
    ImportSummary,
    OutcomeStatus,
    RowRecord,
    ValidationProblem,
    VehicleDetails,
    VehicleRow,
)
from fleetdesk.ingestion.workbook_parser import TabularParser, read_first_sheet
from fleetdesk.logging_utils import log_event
from fleetdesk.services.address_resolver import AddressHierarchyResolver, AddressResolutionError
from fleetdesk.services.summary import summarize
from fleetdesk.store.base import RecordStore
from fleetdesk.store.errors import DuplicateKeyError, RecordStoreError
from fleetdesk.store.sqlalchemy_store import SQLAlchemyRecordStore
from fleetdesk.validators.row_validator import ImportRowValidator

logger = logging.getLogger(__name__)

DUPLICATE_MESSAGES: dict[str, str] = {
    "drivers": "National ID already registered.",
    "customers": "Tax ID already registered.",
    "vehicles": "Plate number already registered.",
}


class EntityImportService:
    """
    Coordinates validation, address resolution and record creation per row.
    """

    def __init__(
        self,
        store: RecordStore,
        *,
        default_neighborhood: str,
        initial_driver_status: str,
        log_validation_errors: bool,
        validator: ImportRowValidator | None = None,
        resolver: AddressHierarchyResolver | None = None,
        parser: TabularParser | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._store = store
        self._default_neighborhood = default_neighborhood
        self._initial_driver_status = initial_driver_status
        self._log_validation_errors = log_validation_errors
        self._validator = validator or ImportRowValidator()
        self._resolver = resolver or AddressHierarchyResolver(store)
        self._parser = parser
        self._today = today

    def import_workbook(
        self,
        content: bytes,
        kind: EntityKind,
        *,
        tenant_id: int,
        selected_rows: Collection[int] | None = None,
    ) -> ImportSummary:
        """
        Parse the first sheet of ``content`` and import its rows.

        WorkbookParseError and EmptyWorkbookError propagate before any row
        is touched.
        """

        rows = read_first_sheet(content, self._parser)
        return self.run_import(rows, kind, tenant_id=tenant_id, selected_rows=selected_rows)

    def run_import(
        self,
        rows: Sequence[RowRecord],
        kind: EntityKind,
        *,
        tenant_id: int,
        selected_rows: Collection[int] | None = None,
    ) -> ImportSummary:
        """
        Import rows sequentially and summarize the outcomes.

        When ``selected_rows`` is given, only rows whose ``source_row`` is in
        it are imported; the others produce no outcome. Rows with no value
        at all are skipped.
        """

        selected = None if selected_rows is None else set(selected_rows)
        log_event(
            logger,
            logging.INFO,
            "import_started",
            kind=kind.value,
            tenant_id=tenant_id,
            rows=len(rows),
            selected=None if selected is None else len(selected),
        )

        outcomes: list[ImportOutcome] = []
        for row in rows:
            if selected is not None and row.source_row not in selected:
                continue
            if self._validator.is_completely_empty_row(row):
                logger.debug("Skipping empty row=%s", row.source_row)
                continue

            outcome = self.import_row(row, kind, tenant_id=tenant_id)
            if not outcome.succeeded:
                log_event(
                    logger,
                    logging.WARNING,
                    "import_row_failed",
                    kind=kind.value,
                    row=outcome.row,
                    entity_id=outcome.entity_id,
                    errors=list(outcome.errors),
                )
            outcomes.append(outcome)

        summary = summarize(outcomes)
        log_event(
            logger,
            logging.INFO,
            "import_finished",
            kind=kind.value,
            tenant_id=tenant_id,
            total=summary.total,
            succeeded=summary.succeeded,
            failed=summary.failed,
        )
        return summary

    def import_row(self, row: RowRecord, kind: EntityKind, *, tenant_id: int) -> ImportOutcome:
        """
        Import one row and report what happened. Never raises.
        """

        try:
            problems = self._validator.validate_row(row, kind)
            if problems:
                self._log_problems(problems)
                return _failed(row.source_row, [problem.describe() for problem in problems])

            typed = self._validator.coerce(row, kind)
            if isinstance(typed, DriverRow):
                return self._import_driver(typed, tenant_id)
            if isinstance(typed, CustomerRow):
                return self._import_customer(typed, tenant_id)
            return self._import_vehicle(typed, tenant_id)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected failure importing %s row=%s", kind.value, row.source_row)
            return _failed(row.source_row, [f"Unexpected error: {exc}"])

    # ------------------------------------------------------------------
    # Per-kind import
    # ------------------------------------------------------------------

    def _import_driver(self, row: DriverRow, tenant_id: int) -> ImportOutcome:
        fields = {
            "name": row.name,
            "national_id": row.national_id,
            "email": row.email,
            "phone": row.phone,
            "birth_date": row.birth_date,
            "gender": row.gender,
            "role": row.role,
            "registration_status": self._initial_driver_status,
            "registered_on": self._today(),
        }
        created, failure = self._create_primary("drivers", fields, row.source_row, tenant_id)
        if failure is not None:
            return failure
        driver_id = int(created["id"])
        messages: list[str] = []

        if row.address.is_resolvable:
            try:
                self._link_address(driver_id, row.address, tenant_id)
            except (AddressResolutionError, RecordStoreError) as exc:
                logger.warning(
                    "Driver address not linked row=%s driver_id=%s: %s",
                    row.source_row,
                    driver_id,
                    exc,
                )
                messages.append(f"Address not saved: {exc}")
            except Exception as exc:  # noqa: BLE001
                logger.exception(
                    "Unexpected failure linking driver address row=%s driver_id=%s",
                    row.source_row,
                    driver_id,
                )
                messages.append(f"Address not saved: {exc}")

        if row.role == DriverRole.AFFILIATED and row.vehicle.plate:
            try:
                self._store.create(
                    "vehicles",
                    _vehicle_fields(row.vehicle, driver_id=driver_id),
                    tenant_id=tenant_id,
                )
            except DuplicateKeyError:
                messages.append(DUPLICATE_MESSAGES["vehicles"])
                return ImportOutcome(row.source_row, OutcomeStatus.FAILED, driver_id, tuple(messages))
            except RecordStoreError as exc:
                messages.append(f"Failed to create vehicle: {exc}")
                return ImportOutcome(row.source_row, OutcomeStatus.FAILED, driver_id, tuple(messages))
            except Exception as exc:  # noqa: BLE001
                logger.exception(
                    "Unexpected failure creating vehicle row=%s driver_id=%s",
                    row.source_row,
                    driver_id,
                )
                messages.append(f"Failed to create vehicle: {exc}")
                return ImportOutcome(row.source_row, OutcomeStatus.FAILED, driver_id, tuple(messages))

        return ImportOutcome(row.source_row, OutcomeStatus.SUCCESS, driver_id, tuple(messages))

    def _import_customer(self, row: CustomerRow, tenant_id: int) -> ImportOutcome:
        fields = {
            "name": row.name,
            "tax_id": row.tax_id,
            "email": row.email,
            "phone": row.phone,
            "is_active": True,
        }
        created, failure = self._create_primary("customers", fields, row.source_row, tenant_id)
        if failure is not None:
            return failure
        return ImportOutcome(row.source_row, OutcomeStatus.SUCCESS, int(created["id"]))

    def _import_vehicle(self, row: VehicleRow, tenant_id: int) -> ImportOutcome:
        created, failure = self._create_primary(
            "vehicles",
            _vehicle_fields(row.vehicle),
            row.source_row,
            tenant_id,
        )
        if failure is not None:
            return failure
        return ImportOutcome(row.source_row, OutcomeStatus.SUCCESS, int(created["id"]))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _create_primary(
        self,
        table: str,
        fields: dict[str, Any],
        source_row: int,
        tenant_id: int,
    ) -> tuple[dict[str, Any], ImportOutcome | None]:
        try:
            return self._store.create(table, fields, tenant_id=tenant_id), None
        except DuplicateKeyError:
            return {}, _failed(source_row, [DUPLICATE_MESSAGES[table]])
        except RecordStoreError as exc:
            return {}, _failed(source_row, [f"Failed to create record: {exc}"])

    def _link_address(self, driver_id: int, address: AddressInput, tenant_id: int) -> None:
        street_id = self._resolver.resolve_street(
            address.state or "",
            address.city or "",
            address.neighborhood or self._default_neighborhood,
            address.street or "",
            address.postal_code,
            tenant_id=tenant_id,
        )
        self._store.create(
            "driver_addresses",
            {
                "driver_id": driver_id,
                "street_id": street_id,
                "number": address.number,
                "complement": address.complement,
            },
            tenant_id=tenant_id,
        )

    def _log_problems(self, problems: list[ValidationProblem]) -> None:
        if not self._log_validation_errors:
            return
        for problem in problems:
            logger.warning(
                "Import validation error row=%s field=%s message=%s",
                problem.row,
                problem.field,
                problem.message,
            )


def _failed(source_row: int, messages: list[str]) -> ImportOutcome:
    return ImportOutcome(source_row, OutcomeStatus.FAILED, None, tuple(messages))


def _vehicle_fields(details: VehicleDetails, *, driver_id: int | None = None) -> dict[str, Any]:
    return {
        "plate": details.plate,
        "make": details.make,
        "model": details.model,
        "year": details.year,
        "color": details.color,
        "vehicle_class": details.vehicle_class,
        "fuel": details.fuel,
        "weight": details.weight,
        "volume": details.volume,
        "has_tracker": details.has_tracker,
        "tracker_make": details.tracker_make,
        "is_active": True,
        "driver_id": driver_id,
    }


def build_import_service(db: Session) -> EntityImportService:
    """
    Create an import service bound to one database session.
    """

    settings = get_import_settings()
    return EntityImportService(
        SQLAlchemyRecordStore(db),
        default_neighborhood=settings.default_neighborhood,
        initial_driver_status=settings.initial_driver_status,
        log_validation_errors=settings.log_validation_errors,
    )
