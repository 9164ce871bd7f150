"""
tests/conftest.py

Shared fixtures: an in-memory SQLite database with the full schema and a
handful of seeded states, plus an openpyxl workbook builder.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from datetime import date
from io import BytesIO
from typing import Any

import pytest
from openpyxl import Workbook
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from db.base import Base
from db.models import State
from fleetdesk.services.import_service import EntityImportService
from fleetdesk.store.sqlalchemy_store import SQLAlchemyRecordStore

SEEDED_STATES: tuple[tuple[str, str], ...] = (
    ("SP", "São Paulo"),
    ("RJ", "Rio de Janeiro"),
    ("MG", "Minas Gerais"),
    ("PR", "Paraná"),
    ("IL", "Illinois"),
)

IMPORT_DAY = date(2026, 10, 19)

WorkbookBuilder = Callable[[Sequence[str], Sequence[Sequence[Any]]], bytes]


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    with Session(engine) as seed:
        seed.add_all(State(code=code, name=name) for code, name in SEEDED_STATES)
        seed.commit()
    yield engine
    engine.dispose()


@pytest.fixture()
def session(engine: Engine) -> Iterator[Session]:
    db = Session(engine, expire_on_commit=False)
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def store(session: Session) -> SQLAlchemyRecordStore:
    return SQLAlchemyRecordStore(session)


@pytest.fixture()
def import_service(store: SQLAlchemyRecordStore) -> EntityImportService:
    return EntityImportService(
        store,
        default_neighborhood="Centro",
        initial_driver_status="registered",
        log_validation_errors=False,
        today=lambda: IMPORT_DAY,
    )


@pytest.fixture()
def build_workbook() -> WorkbookBuilder:
    """Return a helper that writes headers and rows into xlsx bytes."""

    def _build(headers: Sequence[str], rows: Sequence[Sequence[Any]]) -> bytes:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = "Import"
        sheet.append(list(headers))
        for row in rows:
            sheet.append(list(row))
        buffer = BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()

    return _build
