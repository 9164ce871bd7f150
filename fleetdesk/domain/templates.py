"""
fleetdesk/domain/templates.py

Column headers expected in import spreadsheets, per entity kind.
"""

from __future__ import annotations

from fleetdesk.domain.imports import EntityKind


class Column:
    NAME = "Name"
    NATIONAL_ID = "NationalId"
    TAX_ID = "TaxId"
    EMAIL = "Email"
    PHONE = "Phone"
    BIRTH_DATE = "BirthDate"
    GENDER = "Gender"
    ROLE = "Role"
    STREET = "Street"
    NUMBER = "Number"
    COMPLEMENT = "Complement"
    POSTAL_CODE = "PostalCode"
    NEIGHBORHOOD = "Neighborhood"
    CITY = "City"
    STATE = "State"
    PLATE_NUMBER = "PlateNumber"
    MAKE = "Make"
    MODEL = "Model"
    VEHICLE_CLASS = "VehicleClass"
    YEAR = "Year"
    FUEL = "Fuel"
    WEIGHT = "Weight"
    VOLUME = "Volume"
    COLOR = "Color"
    HAS_TRACKER = "HasTracker"
    TRACKER_MAKE = "TrackerMake"


_VEHICLE_COLUMNS: tuple[str, ...] = (
    Column.PLATE_NUMBER,
    Column.MAKE,
    Column.MODEL,
    Column.VEHICLE_CLASS,
    Column.YEAR,
    Column.FUEL,
    Column.WEIGHT,
    Column.VOLUME,
    Column.COLOR,
    Column.HAS_TRACKER,
    Column.TRACKER_MAKE,
)

TEMPLATE_HEADERS: dict[EntityKind, tuple[str, ...]] = {
    EntityKind.DRIVER: (
        Column.NAME,
        Column.NATIONAL_ID,
        Column.EMAIL,
        Column.PHONE,
        Column.BIRTH_DATE,
        Column.GENDER,
        Column.ROLE,
        Column.STREET,
        Column.NUMBER,
        Column.COMPLEMENT,
        Column.POSTAL_CODE,
        Column.NEIGHBORHOOD,
        Column.CITY,
        Column.STATE,
        *_VEHICLE_COLUMNS,
    ),
    EntityKind.CUSTOMER: (
        Column.NAME,
        Column.TAX_ID,
        Column.EMAIL,
        Column.PHONE,
    ),
    EntityKind.VEHICLE: _VEHICLE_COLUMNS,
}


def template_headers(kind: EntityKind) -> tuple[str, ...]:
    return TEMPLATE_HEADERS[kind]
