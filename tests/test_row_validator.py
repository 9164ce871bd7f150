from __future__ import annotations

import unittest
from datetime import date
from typing import Any

from fleetdesk.domain.imports import CustomerRow, DriverRow, EntityKind, RowRecord, VehicleRow
from fleetdesk.validators.row_validator import ImportRowValidator, clean_text, normalize_plate, to_bool


def _row(source_row: int = 2, **values: Any) -> RowRecord:
    return RowRecord(source_row=source_row, values=values)


def _driver(**overrides: Any) -> RowRecord:
    values: dict[str, Any] = {"Name": "Ana Souza", "NationalId": "123.456.789-01"}
    values.update(overrides)
    return _row(**values)


class TestDriverRules(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = ImportRowValidator()

    def _fields(self, row: RowRecord) -> dict[str, str]:
        return {problem.field: problem.message for problem in self.validator.validate_row(row, EntityKind.DRIVER)}

    def test_minimal_driver_is_valid(self) -> None:
        self.assertEqual(self.validator.validate_row(_driver(), EntityKind.DRIVER), [])

    def test_name_and_national_id_are_required(self) -> None:
        problems = self.validator.validate_row(_row(source_row=7, Name="  "), EntityKind.DRIVER)

        self.assertEqual({problem.field for problem in problems}, {"Name", "NationalId"})
        self.assertTrue(all(problem.row == 7 for problem in problems))
        self.assertTrue(all(problem.message == "Required value is missing." for problem in problems))

    def test_national_id_digit_count(self) -> None:
        self.assertEqual(self._fields(_driver(NationalId="1234")), {"NationalId": "Must contain 11 digits."})

    def test_numeric_national_id_cell(self) -> None:
        self.assertEqual(self._fields(_driver(NationalId=12345678901)), {})

    def test_unknown_role(self) -> None:
        self.assertEqual(
            self._fields(_driver(Role="Boss")),
            {"Role": "Must be one of: Affiliated, Driver."},
        )

    def test_affiliated_requires_plate_and_vehicle_class(self) -> None:
        self.assertEqual(
            self._fields(_driver(Role="Affiliated")),
            {
                "PlateNumber": "Required for affiliated drivers.",
                "VehicleClass": "Required for affiliated drivers.",
            },
        )

    def test_affiliated_with_plate_still_needs_vehicle_class(self) -> None:
        self.assertEqual(
            self._fields(_driver(Role="Affiliated", PlateNumber="ABC1234")),
            {"VehicleClass": "Required for affiliated drivers."},
        )

    def test_street_requires_neighborhood_city_and_state(self) -> None:
        fields = self._fields(_driver(Street="Rua A"))
        self.assertEqual(set(fields), {"Neighborhood", "City", "State"})

    def test_city_without_state(self) -> None:
        self.assertEqual(
            self._fields(_driver(City="Campinas")),
            {"State": "Required when an address is given."},
        )

    def test_full_address_is_valid(self) -> None:
        row = _driver(Street="Rua A", Neighborhood="Centro", City="Campinas", State="SP")
        self.assertEqual(self._fields(row), {})

    def test_email_and_birth_date(self) -> None:
        fields = self._fields(_driver(Email="ana.example.com", BirthDate="31/02/1990"))
        self.assertEqual(fields["Email"], "Invalid e-mail address: ana.example.com.")
        self.assertEqual(fields["BirthDate"], "Invalid date: 31/02/1990.")

    def test_driver_plate_length(self) -> None:
        fields = self._fields(_driver(Role="Affiliated", PlateNumber="ABC-12345", VehicleClass="VAN"))
        self.assertEqual(fields, {"PlateNumber": "Must have at most 7 letters or digits."})


class TestCustomerAndVehicleRules(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = ImportRowValidator()

    def test_customer_tax_id(self) -> None:
        valid = _row(Name="ACME", TaxId="12.345.678/0001-95")
        invalid = _row(source_row=3, Name="ACME", TaxId="123")

        problems = self.validator.validate([valid, invalid], EntityKind.CUSTOMER)

        self.assertEqual(len(problems), 1)
        self.assertEqual((problems[0].row, problems[0].field), (3, "TaxId"))
        self.assertEqual(problems[0].message, "Must contain 14 digits.")

    def test_vehicle_requires_plate_and_class(self) -> None:
        problems = self.validator.validate_row(_row(Make="Fiat"), EntityKind.VEHICLE)
        self.assertEqual({problem.field for problem in problems}, {"PlateNumber", "VehicleClass"})

    def test_vehicle_plate_and_year(self) -> None:
        row = _row(PlateNumber="ABC-1D234", VehicleClass="VAN", Year="98")
        messages = {problem.field: problem.message for problem in self.validator.validate_row(row, EntityKind.VEHICLE)}

        self.assertEqual(messages["PlateNumber"], "Must have at most 7 letters or digits.")
        self.assertEqual(messages["Year"], "Must have exactly 4 digits: 98.")

    def test_seven_character_plate_with_separator_is_valid(self) -> None:
        row = _row(PlateNumber="abc-1d23", VehicleClass="VAN", Year=2019)
        self.assertEqual(self.validator.validate_row(row, EntityKind.VEHICLE), [])


class TestCoercion(unittest.TestCase):
    def setUp(self) -> None:
        self.validator = ImportRowValidator()

    def test_driver_row(self) -> None:
        row = _driver(
            Phone="(11) 98765-4321",
            BirthDate=32874,
            Street=" Rua A ",
            Neighborhood="Centro",
            City="Campinas",
            State="sp",
            PostalCode="",
            PlateNumber="abc-1d23",
            HasTracker="Sim",
        )

        typed = self.validator.coerce(row, EntityKind.DRIVER)

        self.assertIsInstance(typed, DriverRow)
        self.assertEqual(typed.national_id, "12345678901")
        self.assertEqual(typed.phone, "11987654321")
        self.assertEqual(typed.role, "Driver")
        self.assertEqual(typed.birth_date, date(1990, 1, 1))
        self.assertEqual(typed.address.street, "Rua A")
        self.assertIsNone(typed.address.postal_code)
        self.assertTrue(typed.address.is_resolvable)
        self.assertEqual(typed.vehicle.plate, "ABC1D23")
        self.assertTrue(typed.vehicle.has_tracker)

    def test_customer_and_vehicle_rows(self) -> None:
        customer = self.validator.coerce(_row(Name="ACME", TaxId="12.345.678/0001-95"), EntityKind.CUSTOMER)
        vehicle = self.validator.coerce(_row(PlateNumber="xyz9876", VehicleClass="VAN", Year=2019.0), EntityKind.VEHICLE)

        self.assertIsInstance(customer, CustomerRow)
        self.assertEqual(customer.tax_id, "12345678000195")
        self.assertIsNone(customer.email)
        self.assertIsInstance(vehicle, VehicleRow)
        self.assertEqual(vehicle.vehicle.plate, "XYZ9876")
        self.assertEqual(vehicle.vehicle.year, "2019")
        self.assertFalse(vehicle.vehicle.has_tracker)


class TestCellHelpers(unittest.TestCase):
    def test_empty_row_detection(self) -> None:
        validator = ImportRowValidator()
        self.assertTrue(validator.is_completely_empty_row(_row(Name=None, Email="  ", Phone="\xa0")))
        self.assertFalse(validator.is_completely_empty_row(_row(Name="x")))

    def test_helpers(self) -> None:
        self.assertEqual(clean_text(12345.0), "12345")
        self.assertEqual(normalize_plate(" abc 1234 "), "ABC1234")
        self.assertTrue(to_bool(True))
        self.assertTrue(to_bool("yes"))
        self.assertFalse(to_bool("Não"))
        self.assertFalse(to_bool(None))


if __name__ == "__main__":
    unittest.main()
