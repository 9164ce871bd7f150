"""
fleetdesk/validators/row_validator.py

Row-level validation and type coercion for spreadsheet imports.

Validation is pure: it only looks at the row. Coercion turns a row that
passed validation into the typed record the importer works with.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from db.models.driver import DriverRole
from fleetdesk.domain.imports import (
    AddressInput,
    CustomerRow,
    DriverRow,
    EntityKind,
    RowRecord,
    ValidationProblem,
    VehicleDetails,
    VehicleRow,
)
from fleetdesk.domain.templates import Column
from fleetdesk.validators.dates import parse_calendar_date

NATIONAL_ID_DIGITS = 11
TAX_ID_DIGITS = 14
MAX_PLATE_LENGTH = 7

ALLOWED_ROLES = {DriverRole.DRIVER, DriverRole.AFFILIATED}
TRUTHY_VALUES = {"true", "yes", "y", "1", "x", "sim"}

_NON_DIGITS = re.compile(r"\D")
_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")
_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_YEAR = re.compile(r"^\d{4}$")

ImportRow = DriverRow | CustomerRow | VehicleRow


class ImportRowValidator:
    """
    Validates raw spreadsheet rows and coerces them into typed records.
    """

    def validate(
        self,
        rows: Sequence[RowRecord],
        kind: EntityKind,
    ) -> list[ValidationProblem]:
        """
        Validate every row and return all problems in row order.
        """

        problems: list[ValidationProblem] = []
        for row in rows:
            problems.extend(self.validate_row(row, kind))
        return problems

    def validate_row(self, row: RowRecord, kind: EntityKind) -> list[ValidationProblem]:
        problems: list[ValidationProblem] = []
        if kind is EntityKind.DRIVER:
            self._check_driver(row, problems)
        elif kind is EntityKind.CUSTOMER:
            self._check_customer(row, problems)
        else:
            self._check_vehicle(row, problems)
        return problems

    def is_completely_empty_row(self, row: RowRecord) -> bool:
        """
        Return True when all values in the row are empty or whitespace.
        """

        return all(not clean_text(value) for value in row.values.values())

    def coerce(self, row: RowRecord, kind: EntityKind) -> ImportRow:
        """
        Build the typed record for a row that passed ``validate_row``.
        """

        if kind is EntityKind.DRIVER:
            return self._coerce_driver(row)
        if kind is EntityKind.CUSTOMER:
            return CustomerRow(
                source_row=row.source_row,
                name=clean_text(row.get(Column.NAME)),
                tax_id=digits_only(row.get(Column.TAX_ID)),
                email=optional_text(row.get(Column.EMAIL)),
                phone=digits_only(row.get(Column.PHONE)) or None,
            )
        return VehicleRow(source_row=row.source_row, vehicle=self._coerce_vehicle(row))

    # ------------------------------------------------------------------
    # Rules per kind
    # ------------------------------------------------------------------

    def _check_driver(self, row: RowRecord, problems: list[ValidationProblem]) -> None:
        self._require(row, Column.NAME, problems)
        if self._require(row, Column.NATIONAL_ID, problems):
            self._check_digit_count(row, Column.NATIONAL_ID, NATIONAL_ID_DIGITS, problems)

        role = clean_text(row.get(Column.ROLE))
        if role and role not in ALLOWED_ROLES:
            allowed = ", ".join(sorted(ALLOWED_ROLES))
            self._add(problems, row, Column.ROLE, f"Must be one of: {allowed}.")
        if role == DriverRole.AFFILIATED:
            for column in (Column.PLATE_NUMBER, Column.VEHICLE_CLASS):
                if not clean_text(row.get(column)):
                    self._add(problems, row, column, "Required for affiliated drivers.")

        has_street = bool(clean_text(row.get(Column.STREET)))
        has_neighborhood = bool(clean_text(row.get(Column.NEIGHBORHOOD)))
        has_city = bool(clean_text(row.get(Column.CITY)))
        has_state = bool(clean_text(row.get(Column.STATE)))
        if has_street or has_neighborhood or has_city:
            if not has_city:
                self._add(problems, row, Column.CITY, "Required when an address is given.")
            if not has_state:
                self._add(problems, row, Column.STATE, "Required when an address is given.")
        if has_street and not has_neighborhood:
            self._add(problems, row, Column.NEIGHBORHOOD, "Required when Street is given.")

        self._check_email(row, problems)
        birth_date = row.get(Column.BIRTH_DATE)
        if clean_text(birth_date) and parse_calendar_date(birth_date) is None:
            self._add(problems, row, Column.BIRTH_DATE, f"Invalid date: {clean_text(birth_date)}.")
        if clean_text(row.get(Column.PLATE_NUMBER)):
            self._check_plate(row, problems)

    def _check_customer(self, row: RowRecord, problems: list[ValidationProblem]) -> None:
        self._require(row, Column.NAME, problems)
        if self._require(row, Column.TAX_ID, problems):
            self._check_digit_count(row, Column.TAX_ID, TAX_ID_DIGITS, problems)
        self._check_email(row, problems)

    def _check_vehicle(self, row: RowRecord, problems: list[ValidationProblem]) -> None:
        if self._require(row, Column.PLATE_NUMBER, problems):
            self._check_plate(row, problems)
        self._require(row, Column.VEHICLE_CLASS, problems)
        year = clean_text(row.get(Column.YEAR))
        if year and not _YEAR.match(year):
            self._add(problems, row, Column.YEAR, f"Must have exactly 4 digits: {year}.")

    # ------------------------------------------------------------------
    # Shared checks
    # ------------------------------------------------------------------

    def _require(self, row: RowRecord, column: str, problems: list[ValidationProblem]) -> bool:
        if clean_text(row.get(column)):
            return True
        self._add(problems, row, column, "Required value is missing.")
        return False

    def _check_digit_count(
        self,
        row: RowRecord,
        column: str,
        expected: int,
        problems: list[ValidationProblem],
    ) -> None:
        if len(digits_only(row.get(column))) != expected:
            self._add(problems, row, column, f"Must contain {expected} digits.")

    def _check_plate(self, row: RowRecord, problems: list[ValidationProblem]) -> None:
        if len(normalize_plate(row.get(Column.PLATE_NUMBER))) > MAX_PLATE_LENGTH:
            self._add(
                problems,
                row,
                Column.PLATE_NUMBER,
                f"Must have at most {MAX_PLATE_LENGTH} letters or digits.",
            )

    def _check_email(self, row: RowRecord, problems: list[ValidationProblem]) -> None:
        email = clean_text(row.get(Column.EMAIL))
        if email and not _EMAIL.match(email):
            self._add(problems, row, Column.EMAIL, f"Invalid e-mail address: {email}.")

    @staticmethod
    def _add(problems: list[ValidationProblem], row: RowRecord, column: str, message: str) -> None:
        problems.append(ValidationProblem(row=row.source_row, field=column, message=message))

    # ------------------------------------------------------------------
    # Coercion
    # ------------------------------------------------------------------

    def _coerce_driver(self, row: RowRecord) -> DriverRow:
        return DriverRow(
            source_row=row.source_row,
            name=clean_text(row.get(Column.NAME)),
            national_id=digits_only(row.get(Column.NATIONAL_ID)),
            role=clean_text(row.get(Column.ROLE)) or DriverRole.DRIVER,
            email=optional_text(row.get(Column.EMAIL)),
            phone=digits_only(row.get(Column.PHONE)) or None,
            birth_date=parse_calendar_date(row.get(Column.BIRTH_DATE)),
            gender=optional_text(row.get(Column.GENDER)),
            address=AddressInput(
                street=optional_text(row.get(Column.STREET)),
                number=optional_text(row.get(Column.NUMBER)),
                complement=optional_text(row.get(Column.COMPLEMENT)),
                postal_code=optional_text(row.get(Column.POSTAL_CODE)),
                neighborhood=optional_text(row.get(Column.NEIGHBORHOOD)),
                city=optional_text(row.get(Column.CITY)),
                state=optional_text(row.get(Column.STATE)),
            ),
            vehicle=self._coerce_vehicle(row),
        )

    def _coerce_vehicle(self, row: RowRecord) -> VehicleDetails:
        return VehicleDetails(
            plate=normalize_plate(row.get(Column.PLATE_NUMBER)) or None,
            make=clean_text(row.get(Column.MAKE)),
            model=clean_text(row.get(Column.MODEL)),
            vehicle_class=clean_text(row.get(Column.VEHICLE_CLASS)),
            year=clean_text(row.get(Column.YEAR)),
            fuel=clean_text(row.get(Column.FUEL)),
            weight=clean_text(row.get(Column.WEIGHT)),
            volume=clean_text(row.get(Column.VOLUME)),
            color=clean_text(row.get(Column.COLOR)),
            has_tracker=to_bool(row.get(Column.HAS_TRACKER)),
            tracker_make=clean_text(row.get(Column.TRACKER_MAKE)),
        )


# ---------------------------------------------------------------------------
# Cell helpers
# ---------------------------------------------------------------------------


def clean_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).replace("\xa0", " ").strip()


def optional_text(value: Any) -> str | None:
    return clean_text(value) or None


def digits_only(value: Any) -> str:
    return _NON_DIGITS.sub("", clean_text(value))


def normalize_plate(value: Any) -> str:
    return _NON_ALNUM.sub("", clean_text(value)).upper()


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value > 0
    return clean_text(value).lower() in TRUTHY_VALUES
