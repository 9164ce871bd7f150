"""
SQLAlchemy-backed record store.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from db.base import TENANT_COLUMN, Base
from db.models import City, Customer, Driver, DriverAddress, Neighborhood, State, Street, Vehicle
from fleetdesk.store.base import Record, RecordStore
from fleetdesk.store.errors import DuplicateKeyError, StoreError, UnknownTableError

logger = logging.getLogger(__name__)

DEFAULT_MODELS: tuple[type[Base], ...] = (
    State,
    City,
    Neighborhood,
    Street,
    Driver,
    DriverAddress,
    Customer,
    Vehicle,
)

_UNIQUE_VIOLATION_SQLSTATE = "23505"


class SQLAlchemyRecordStore(RecordStore):
    """
    Persist records through one SQLAlchemy session.

    Every create and update commits on its own; a failed write is rolled
    back without touching earlier commits.
    """

    def __init__(self, session: Session, *, models: Iterable[type[Base]] = DEFAULT_MODELS) -> None:
        self._session = session
        self._models = {model.__tablename__: model for model in models}

    def create(self, table: str, fields: Mapping[str, Any], *, tenant_id: int | None) -> Record:
        model = self._model(table)
        values = dict(fields)
        if self._is_tenant_scoped(model):
            values[TENANT_COLUMN] = self._require_tenant(table, tenant_id)
        self._check_columns(model, values)

        record = model(**values)
        self._session.add(record)
        try:
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            if _is_unique_violation(exc):
                raise DuplicateKeyError(f"Duplicate key on {table}.", table=table) from exc
            raise StoreError(f"Failed to create {table} record: {exc.orig}", table=table) from exc
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise StoreError(f"Failed to create {table} record: {exc}", table=table) from exc

        created = _as_record(model, record)
        logger.debug("Record created table=%s id=%s tenant=%s", table, created.get("id"), tenant_id)
        return created

    def find_one(self, table: str, match: Mapping[str, Any], *, tenant_id: int | None) -> Record | None:
        model = self._model(table)
        stmt = (
            select(model)
            .where(*self._conditions(model, match, tenant_id))
            .order_by(model.id)
            .limit(1)
            .execution_options(populate_existing=True)
        )
        try:
            found = self._session.execute(stmt).scalars().first()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise StoreError(f"Failed to query {table}: {exc}", table=table) from exc
        return None if found is None else _as_record(model, found)

    def update(
        self,
        table: str,
        match: Mapping[str, Any],
        patch: Mapping[str, Any],
        *,
        tenant_id: int | None,
    ) -> int:
        model = self._model(table)
        if TENANT_COLUMN in patch:
            raise StoreError(f"{TENANT_COLUMN} cannot be changed.", table=table)
        self._check_columns(model, patch)

        stmt = (
            update(model)
            .where(*self._conditions(model, match, tenant_id))
            .values(**dict(patch))
        )
        try:
            result = self._session.execute(stmt)
            self._session.commit()
        except IntegrityError as exc:
            self._session.rollback()
            if _is_unique_violation(exc):
                raise DuplicateKeyError(f"Duplicate key on {table}.", table=table) from exc
            raise StoreError(f"Failed to update {table}: {exc.orig}", table=table) from exc
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise StoreError(f"Failed to update {table}: {exc}", table=table) from exc
        return int(result.rowcount or 0)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _model(self, table: str) -> type[Base]:
        try:
            return self._models[table]
        except KeyError:
            raise UnknownTableError(f"Unknown table '{table}'.", table=table) from None

    def _conditions(
        self,
        model: type[Base],
        match: Mapping[str, Any],
        tenant_id: int | None,
    ) -> list[ColumnElement[bool]]:
        self._check_columns(model, match)
        columns = model.__table__.c
        conditions: list[ColumnElement[bool]] = []
        for name, value in match.items():
            column = columns[name]
            conditions.append(column.is_(None) if value is None else column == value)
        if self._is_tenant_scoped(model):
            tenant = self._require_tenant(model.__tablename__, tenant_id)
            conditions.append(columns[TENANT_COLUMN] == tenant)
        return conditions

    @staticmethod
    def _is_tenant_scoped(model: type[Base]) -> bool:
        return TENANT_COLUMN in model.__table__.c

    @staticmethod
    def _require_tenant(table: str, tenant_id: int | None) -> int:
        if tenant_id is None:
            raise StoreError(f"A tenant id is required for {table}.", table=table)
        return tenant_id

    @staticmethod
    def _check_columns(model: type[Base], fields: Mapping[str, Any]) -> None:
        unknown = sorted(set(fields) - set(model.__table__.c.keys()))
        if unknown:
            raise StoreError(
                f"Unknown column(s) for {model.__tablename__}: {', '.join(unknown)}.",
                table=model.__tablename__,
            )


def _as_record(model: type[Base], instance: Base) -> Record:
    return {column.key: getattr(instance, column.key) for column in model.__table__.columns}


def _is_unique_violation(exc: IntegrityError) -> bool:
    original = exc.orig
    code = getattr(original, "sqlstate", None) or getattr(original, "pgcode", None)
    if code == _UNIQUE_VIOLATION_SQLSTATE:
        return True
    return "unique constraint" in str(original).lower()
