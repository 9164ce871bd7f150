"""
db/models/address.py

Four-level postal address hierarchy: State -> City -> Neighborhood -> Street.

States are pre-seeded reference data keyed by their two-letter code. The
lower levels are created on demand by the import pipeline and are shared
across organizations. None of the lower levels carries a unique index on its
natural key; the importer keeps them unique by resolving rows one at a time.
"""

from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base, TimestampMixin


class State(Base):
    __tablename__ = "states"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(
        String(2),
        nullable=False,
        unique=True,
        comment="Two-letter state code",
    )
    name: Mapped[str] = mapped_column(String(120), nullable=False)

    def __repr__(self) -> str:
        return f"<State id={self.id} code={self.code!r}>"


class City(Base, TimestampMixin):
    __tablename__ = "cities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    state_id: Mapped[int] = mapped_column(
        ForeignKey("states.id", ondelete="RESTRICT"),
        nullable=False,
    )

    __table_args__ = (Index("ix_cities_name_state", "name", "state_id"),)


class Neighborhood(Base, TimestampMixin):
    __tablename__ = "neighborhoods"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    city_id: Mapped[int] = mapped_column(
        ForeignKey("cities.id", ondelete="RESTRICT"),
        nullable=False,
    )

    __table_args__ = (Index("ix_neighborhoods_name_city", "name", "city_id"),)


class Street(Base, TimestampMixin):
    __tablename__ = "streets"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    postal_code: Mapped[str | None] = mapped_column(
        String(16),
        nullable=True,
        comment="Part of the natural key; NULL when unknown",
    )
    neighborhood_id: Mapped[int] = mapped_column(
        ForeignKey("neighborhoods.id", ondelete="RESTRICT"),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_streets_name_neighborhood", "name", "neighborhood_id"),
        Index("ix_streets_postal_code", "postal_code"),
    )
