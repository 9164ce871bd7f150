"""
fleetdesk/validators/dates.py

Normalization of spreadsheet date cells to ``YYYY-MM-DD`` strings.

Spreadsheet serials count days from 1899-12-31 and inherit the historical
1900 leap-year bug, so serial 25569 is 1970-01-01. Every serial after
February 1900 converts correctly by offsetting from that anchor.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timedelta, timezone
from typing import Any

UNIX_EPOCH_SERIAL = 25569
_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ISO_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")


def to_calendar_date(value: Any) -> str | None:
    """
    Convert a spreadsheet date cell to a calendar date string.

    Returns None for blanks and for anything that cannot be read as a date.
    Callers treat None as "no date"; whether that is an error depends on
    whether the column is mandatory.
    """

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (int, float)):
        return _from_serial(value)
    if isinstance(value, str):
        return _from_text(value)
    return None


def parse_calendar_date(value: Any) -> date | None:
    """
    Normalize ``value`` and return it as a ``date``.

    Strings that only look ISO-like (``2024-13-40``) pass the prefix check
    in ``to_calendar_date`` but are rejected here.
    """

    normalized = to_calendar_date(value)
    if normalized is None:
        return None
    try:
        return date.fromisoformat(normalized[:10])
    except ValueError:
        return None


def _from_serial(serial: int | float) -> str | None:
    if isinstance(serial, float) and not math.isfinite(serial):
        return None
    try:
        moment = _UNIX_EPOCH + timedelta(days=serial - UNIX_EPOCH_SERIAL)
    except OverflowError:
        return None
    return moment.date().isoformat()


def _from_text(raw: str) -> str | None:
    text = raw.strip()
    if not text:
        return None
    if _ISO_PREFIX.match(text):
        return text

    parts = text.split("/")
    if len(parts) != 3:
        return None
    try:
        day, month, year = (int(part) for part in parts)
    except ValueError:
        return None
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None
