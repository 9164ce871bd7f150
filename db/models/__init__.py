"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.address import City, Neighborhood, State, Street
from db.models.customer import Customer
from db.models.driver import Driver, DriverAddress, DriverRole
from db.models.vehicle import Vehicle

__all__ = [
    "State",
    "City",
    "Neighborhood",
    "Street",
    "Driver",
    "DriverAddress",
    "DriverRole",
    "Customer",
    "Vehicle",
]
