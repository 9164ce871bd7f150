"""
db/base.py

Declarative base and shared mixins for all SQLAlchemy models.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

TENANT_COLUMN = "organization_id"


class Base(DeclarativeBase):
    """
    Project-wide declarative base.
    All models must inherit from this class.
    """

    type_annotation_map: dict[type, Any] = {}


class TimestampMixin:
    """
    Mixin that adds created_at and updated_at to any model.
    updated_at is automatically refreshed on every UPDATE via onupdate.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=lambda: datetime.now(timezone.utc),
    )


class TenantMixin:
    """
    Mixin for records owned by one organization.

    The record store scopes every read and write on tables carrying this
    column to the caller's tenant id. Reference tables (states, address
    levels) do not use it and are shared across organizations.
    """

    organization_id: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        index=True,
        comment="Owning organization (tenant)",
    )
