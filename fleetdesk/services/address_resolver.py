"""
fleetdesk/services/address_resolver.py

Resolves free-text address parts to a street id, creating missing levels.

The hierarchy is State -> City -> Neighborhood -> Street. States are seeded
reference data and are only looked up; the three lower levels are found by
their natural key within the parent and created when absent. Lookup and
create are two separate store calls, so two concurrent imports can create
the same city twice. Imports resolve rows one at a time for that reason.
"""

from __future__ import annotations

import logging
import unicodedata
from typing import Any

from fleetdesk.logging_utils import log_event
from fleetdesk.store.base import RecordStore
from fleetdesk.store.errors import RecordStoreError

logger = logging.getLogger(__name__)

STATE_NAME_TO_CODE: dict[str, str] = {
    "acre": "AC",
    "alagoas": "AL",
    "amapa": "AP",
    "amazonas": "AM",
    "bahia": "BA",
    "ceara": "CE",
    "distrito federal": "DF",
    "espirito santo": "ES",
    "goias": "GO",
    "maranhao": "MA",
    "mato grosso": "MT",
    "mato grosso do sul": "MS",
    "minas gerais": "MG",
    "para": "PA",
    "paraiba": "PB",
    "parana": "PR",
    "pernambuco": "PE",
    "piaui": "PI",
    "rio de janeiro": "RJ",
    "rio grande do norte": "RN",
    "rio grande do sul": "RS",
    "rondonia": "RO",
    "roraima": "RR",
    "santa catarina": "SC",
    "sao paulo": "SP",
    "sergipe": "SE",
    "tocantins": "TO",
}


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class AddressResolutionError(Exception):
    """
    Base error for address resolution failures.
    """


class AddressNotFoundError(AddressResolutionError):
    """
    Raised when a state cannot be matched to seeded reference data.
    """


class AddressDependencyError(AddressResolutionError):
    """
    Raised when a level is requested without the parent levels it needs.
    """


class AddressLevelError(AddressResolutionError):
    """
    Raised when looking up or creating one hierarchy level fails.
    """

    def __init__(self, message: str, *, level: str) -> None:
        super().__init__(message)
        self.level = level


# ---------------------------------------------------------------------------
# State names
# ---------------------------------------------------------------------------


def _fold(text: str) -> str:
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return " ".join(stripped.lower().split())


def resolve_state_code(value: str) -> str | None:
    """
    Map a state given as a two-letter code or a full name to its code.

    Two-letter input is upper-cased and returned as is; whether the code
    exists is decided by the states table. Names are matched ignoring case
    and accents. Returns None for an unknown name.
    """

    text = (value or "").strip()
    if len(text) == 2:
        return text.upper()
    return STATE_NAME_TO_CODE.get(_fold(text))


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------


class AddressHierarchyResolver:
    def __init__(self, store: RecordStore) -> None:
        self._store = store

    def resolve_street(
        self,
        state: str,
        city: str,
        neighborhood: str,
        street: str,
        postal_code: str | None,
        *,
        tenant_id: int,
    ) -> int:
        """
        Return the id of the street, creating city, neighborhood and street
        records on the way when they do not exist yet.

        Calling this twice with the same inputs returns the same id and
        creates nothing the second time.
        """

        state_id = self.resolve_state(state, tenant_id=tenant_id)

        if not _present(city):
            raise AddressDependencyError("City is required to resolve a neighborhood.")
        city_id = self._find_or_create(
            "city",
            "cities",
            {"name": city.strip(), "state_id": state_id},
            tenant_id=tenant_id,
        )

        if not _present(neighborhood):
            raise AddressDependencyError("Neighborhood is required to resolve a street.")
        neighborhood_id = self._find_or_create(
            "neighborhood",
            "neighborhoods",
            {"name": neighborhood.strip(), "city_id": city_id},
            tenant_id=tenant_id,
        )

        if not _present(street):
            raise AddressDependencyError("Street name is required.")
        return self._find_or_create(
            "street",
            "streets",
            {
                "name": street.strip(),
                "postal_code": (postal_code or "").strip() or None,
                "neighborhood_id": neighborhood_id,
            },
            tenant_id=tenant_id,
        )

    def resolve_state(self, state: str, *, tenant_id: int) -> int:
        if not _present(state):
            raise AddressDependencyError("State is required to resolve a city.")

        code = resolve_state_code(state)
        if code is None:
            raise AddressNotFoundError(f"State not found: {state.strip()}")

        try:
            found = self._store.find_one("states", {"code": code}, tenant_id=tenant_id)
        except RecordStoreError as exc:
            raise AddressLevelError(f"Failed to look up state {code}: {exc}", level="state") from exc
        if found is None:
            raise AddressNotFoundError(f"State not found: {state.strip()}")
        return int(found["id"])

    def _find_or_create(
        self,
        level: str,
        table: str,
        key: dict[str, Any],
        *,
        tenant_id: int,
    ) -> int:
        try:
            found = self._store.find_one(table, key, tenant_id=tenant_id)
            if found is not None:
                return int(found["id"])
            created = self._store.create(table, key, tenant_id=tenant_id)
        except RecordStoreError as exc:
            raise AddressLevelError(
                f"Failed to resolve {level} '{key['name']}': {exc}",
                level=level,
            ) from exc

        log_event(
            logger,
            logging.INFO,
            "address_level_created",
            address_level=level,
            record_id=created["id"],
            name=key["name"],
        )
        return int(created["id"])


def _present(value: str | None) -> bool:
    return bool(value and value.strip())
