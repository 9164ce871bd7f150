"""
db/models/vehicle.py

Fleet vehicles. A vehicle may belong to an affiliated driver, be assigned to
a customer, or stand alone.
"""

from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TenantMixin, TimestampMixin


class Vehicle(Base, TenantMixin, TimestampMixin):
    __tablename__ = "vehicles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    plate: Mapped[str] = mapped_column(
        String(7),
        nullable=False,
        comment="Upper-case alphanumeric plate, at most 7 characters",
    )
    make: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    model: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    year: Mapped[str] = mapped_column(String(4), nullable=False, default="")
    color: Mapped[str] = mapped_column(String(60), nullable=False, default="")
    vehicle_class: Mapped[str] = mapped_column(
        String(60),
        nullable=False,
        default="",
        comment="Operational class, e.g. VAN or LIGHT TRUCK",
    )
    fuel: Mapped[str] = mapped_column(String(60), nullable=False, default="")
    weight: Mapped[str] = mapped_column(String(60), nullable=False, default="")
    volume: Mapped[str] = mapped_column(String(60), nullable=False, default="")
    has_tracker: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tracker_make: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    driver_id: Mapped[int | None] = mapped_column(
        ForeignKey("drivers.id", ondelete="SET NULL"),
        nullable=True,
    )
    customer_id: Mapped[int | None] = mapped_column(
        ForeignKey("customers.id", ondelete="SET NULL"),
        nullable=True,
    )

    __table_args__ = (
        UniqueConstraint("organization_id", "plate", name="uq_vehicles_organization_plate"),
        Index("ix_vehicles_driver_id", "driver_id"),
    )

    def __repr__(self) -> str:
        return f"<Vehicle id={self.id} plate={self.plate!r}>"
