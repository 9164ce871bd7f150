"""
fleetdesk/config.py

Application-level configuration helpers.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from db.config import load_env_files


@lru_cache(maxsize=1)
def _load_env_once() -> None:
    """
    Ensure project `.env` files are loaded once before reading app settings.
    """

    load_env_files()


def _get_bool_env(name: str, default: bool) -> bool:
    """
    Read a boolean from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    return raw_value.strip().lower() in {"1", "true", "yes", "on"}


def _get_int_env(name: str, default: int) -> int:
    """
    Read an integer from environment variables with safe fallback.
    """

    _load_env_once()
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        return int(raw_value)
    except ValueError:
        return default


def _get_str_env(name: str, default: str) -> str:
    """
    Read a string from environment variables with fallback.
    """

    _load_env_once()
    value = os.getenv(name)
    if value is None:
        return default
    stripped = value.strip()
    return stripped if stripped else default


@dataclass(frozen=True)
class ImportSettings:
    """
    Runtime settings for spreadsheet imports.

    default_neighborhood is the label used when a row gives a street and a
    city but leaves the neighborhood blank.
    """

    default_neighborhood: str = "Centro"
    initial_driver_status: str = "registered"
    max_reported_errors: int = 1000
    log_validation_errors: bool = True


@dataclass(frozen=True)
class UploadSettings:
    """
    Limits applied to uploaded workbooks before parsing.
    """

    max_bytes: int = 10 * 1024 * 1024


@lru_cache(maxsize=1)
def get_import_settings() -> ImportSettings:
    """
    Return cached import settings from environment variables.
    """

    return ImportSettings(
        default_neighborhood=_get_str_env("IMPORT_DEFAULT_NEIGHBORHOOD", "Centro"),
        initial_driver_status=_get_str_env("IMPORT_INITIAL_DRIVER_STATUS", "registered"),
        max_reported_errors=max(1, _get_int_env("IMPORT_MAX_REPORTED_ERRORS", 1000)),
        log_validation_errors=_get_bool_env("IMPORT_LOG_VALIDATION_ERRORS", True),
    )


@lru_cache(maxsize=1)
def get_upload_settings() -> UploadSettings:
    """
    Return cached upload settings from environment variables.
    """

    return UploadSettings(
        max_bytes=max(1, _get_int_env("UPLOAD_MAX_BYTES", 10 * 1024 * 1024)),
    )
