"""
db/config.py

Database settings for the FleetDesk back office.

The import pipeline only runs against PostgreSQL: per-tenant unique keys
and the seeded state table rely on it. Settings are read from the process
environment, topped up from `.env` / `.env.local` at the project root.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
ENV_FILENAMES = (".env", ".env.local")

# First configured one wins; CLOUD_DATABASE_URL only counts in cloud-like environments.
DATABASE_URL_VARIABLES = (
    "FLEETDESK_DATABASE_URL",
    "DATABASE_URL",
    "CLOUD_DATABASE_URL",
    "LOCAL_DATABASE_URL",
)
CLOUD_ENVIRONMENTS = frozenset({"prod", "production", "staging", "cloud"})

_PSYCOPG_SCHEME = "postgresql+psycopg://"
_BARE_POSTGRES_SCHEMES = ("postgres://", "postgresql://")


class DatabaseConfigError(RuntimeError):
    """Raised when no usable PostgreSQL URL is configured."""


@dataclass(frozen=True)
class DatabaseSettings:
    url: str
    source: str
    echo: bool
    pool_size: int
    max_overflow: int
    pool_recycle_seconds: int


def load_env_files(root: Path | None = None) -> None:
    """
    Copy KEY=VALUE pairs from the project env files into os.environ.

    Variables already set in the process win. Lines may carry a leading
    ``export`` as written by shell-oriented tooling.
    """

    for filename in ENV_FILENAMES:
        env_path = (root or PROJECT_ROOT) / filename
        if not env_path.is_file():
            continue
        for raw_line in env_path.read_text(encoding="utf-8").splitlines():
            line = raw_line.strip()
            if line.startswith("export "):
                line = line[len("export "):].lstrip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = (part.strip() for part in line.split("=", 1))
            if key:
                os.environ.setdefault(key, value.strip("\"'"))


def normalize_postgres_url(url: str) -> str:
    """
    Pin bare postgres URLs (as hosted providers hand them out) to psycopg.
    """

    url = url.strip()
    for scheme in _BARE_POSTGRES_SCHEMES:
        if url.startswith(scheme):
            return _PSYCOPG_SCHEME + url[len(scheme):]
    return url


def _configured_url() -> tuple[str, str] | None:
    environment = os.getenv("ENVIRONMENT", "local").strip().lower()
    for name in DATABASE_URL_VARIABLES:
        if name == "CLOUD_DATABASE_URL" and environment not in CLOUD_ENVIRONMENTS:
            continue
        value = os.getenv(name, "").strip()
        if value:
            return name, value
    return None


def resolve_database_url() -> str:
    """
    Return the psycopg URL of the first configured DATABASE_URL_VARIABLES entry.

    Raises DatabaseConfigError when none is set or the URL is not PostgreSQL.
    """

    load_env_files()
    found = _configured_url()
    if found is None:
        raise DatabaseConfigError(
            "No database URL configured. Set one of: " + ", ".join(DATABASE_URL_VARIABLES) + "."
        )
    name, raw_url = found
    url = normalize_postgres_url(raw_url)
    if not url.startswith("postgresql"):
        raise DatabaseConfigError(f"{name} must point at PostgreSQL.")
    return url


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, ""))
    except ValueError:
        return default


@lru_cache(maxsize=1)
def get_database_settings() -> DatabaseSettings:
    """
    Engine settings for the process, resolved once.
    """

    url = resolve_database_url()
    found = _configured_url()
    return DatabaseSettings(
        url=url,
        source=found[0] if found else "",
        echo=os.getenv("SQL_ECHO", "").strip().lower() in {"1", "true", "yes", "on"},
        pool_size=_env_int("DB_POOL_SIZE", 5),
        max_overflow=_env_int("DB_MAX_OVERFLOW", 10),
        pool_recycle_seconds=_env_int("DB_POOL_RECYCLE", 1800),
    )
