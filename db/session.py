"""
db/session.py

SQLAlchemy engine and session factory.

The engine is created lazily from the environment on first use. Tests and
one-off scripts can bind a different engine with ``configure_engine``.
"""

from __future__ import annotations

from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from db.config import get_database_settings


def create_db_engine() -> Engine:
    settings = get_database_settings()
    return create_engine(
        settings.url,
        echo=settings.echo,
        pool_pre_ping=True,
        pool_recycle=settings.pool_recycle_seconds,
        pool_size=settings.pool_size,
        max_overflow=settings.max_overflow,
    )


_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def configure_engine(engine: Engine | None) -> None:
    """
    Bind the module-level session factory to ``engine``.

    Passing None resets the module so the next call rebuilds the engine
    from the environment.
    """

    global _engine, _session_factory
    _engine = engine
    _session_factory = None


def get_engine() -> Engine:
    """Return the shared engine, creating it on first call."""
    global _engine
    if _engine is None:
        _engine = create_db_engine()
    return _engine


def _get_session_factory() -> sessionmaker[Session]:
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(
            bind=get_engine(),
            class_=Session,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )
    return _session_factory


def SessionLocal() -> Session:
    """Lazy session factory. Drop-in replacement for a sessionmaker() call."""
    return _get_session_factory()()


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency yielding one session per request.
    """

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
