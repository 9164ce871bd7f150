"""
db/models/driver.py

Drivers and their address links.
"""

from __future__ import annotations

from datetime import date

from sqlalchemy import Date, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TenantMixin, TimestampMixin


class DriverRole:
    DRIVER = "Driver"
    AFFILIATED = "Affiliated"


class Driver(Base, TenantMixin, TimestampMixin):
    __tablename__ = "drivers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    national_id: Mapped[str] = mapped_column(
        String(11),
        nullable=False,
        comment="11-digit national id, digits only",
    )
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    birth_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    gender: Mapped[str | None] = mapped_column(String(32), nullable=True)
    role: Mapped[str] = mapped_column(
        String(32),
        nullable=False,
        default=DriverRole.DRIVER,
        comment="Driver or Affiliated (owns the vehicle)",
    )
    registration_status: Mapped[str] = mapped_column(String(32), nullable=False)
    registered_on: Mapped[date] = mapped_column(Date, nullable=False)

    __table_args__ = (
        UniqueConstraint("organization_id", "national_id", name="uq_drivers_organization_national_id"),
        Index("ix_drivers_role", "role"),
    )

    def __repr__(self) -> str:
        return f"<Driver id={self.id} name={self.name!r} role={self.role!r}>"


class DriverAddress(Base, TimestampMixin):
    __tablename__ = "driver_addresses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    driver_id: Mapped[int] = mapped_column(
        ForeignKey("drivers.id", ondelete="CASCADE"),
        nullable=False,
    )
    street_id: Mapped[int] = mapped_column(
        ForeignKey("streets.id", ondelete="RESTRICT"),
        nullable=False,
    )
    number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    complement: Mapped[str | None] = mapped_column(String(255), nullable=True)

    __table_args__ = (Index("ix_driver_addresses_driver_id", "driver_id"),)
