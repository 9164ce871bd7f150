"""
tests/test_address_resolver.py

Find-or-create behaviour of the address hierarchy against the SQLite store.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

import pytest
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from db.models import City, Neighborhood, Street
from fleetdesk.services.address_resolver import (
    AddressDependencyError,
    AddressHierarchyResolver,
    AddressLevelError,
    AddressNotFoundError,
    resolve_state_code,
)
from fleetdesk.store.base import Record, RecordStore
from fleetdesk.store.errors import StoreError
from fleetdesk.store.sqlalchemy_store import SQLAlchemyRecordStore

TENANT = 1


def _count(session: Session, model: type) -> int:
    return session.scalar(select(func.count()).select_from(model)) or 0


class FailingCreateStore(RecordStore):
    """Delegates reads, fails every create on one table."""

    def __init__(self, inner: RecordStore, table: str) -> None:
        self._inner = inner
        self._table = table

    def create(self, table: str, fields: Mapping[str, Any], *, tenant_id: int | None) -> Record:
        if table == self._table:
            raise StoreError("connection reset", table=table)
        return self._inner.create(table, fields, tenant_id=tenant_id)

    def find_one(self, table: str, match: Mapping[str, Any], *, tenant_id: int | None) -> Record | None:
        return self._inner.find_one(table, match, tenant_id=tenant_id)

    def update(self, table: str, match: Mapping[str, Any], patch: Mapping[str, Any], *, tenant_id: int | None) -> int:
        return self._inner.update(table, match, patch, tenant_id=tenant_id)


@pytest.fixture()
def resolver(store: SQLAlchemyRecordStore) -> AddressHierarchyResolver:
    return AddressHierarchyResolver(store)


class TestStateCodes:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("sp", "SP"),
            ("São Paulo", "SP"),
            ("  sao   paulo ", "SP"),
            ("ESPÍRITO SANTO", "ES"),
            ("Mato Grosso do Sul", "MS"),
            ("Atlantis", None),
        ],
    )
    def test_resolve_state_code(self, value: str, expected: str | None) -> None:
        assert resolve_state_code(value) == expected


class TestResolveStreet:
    def test_second_resolution_reuses_every_level(self, resolver, session) -> None:
        first = resolver.resolve_street("SP", "Campinas", "Cambuí", "Rua Coronel Quirino", "13025-000", tenant_id=TENANT)
        second = resolver.resolve_street("São Paulo", "Campinas", "Cambuí", "Rua Coronel Quirino", "13025-000", tenant_id=TENANT)

        assert first == second
        assert (_count(session, City), _count(session, Neighborhood), _count(session, Street)) == (1, 1, 1)

    def test_same_city_name_in_two_states(self, resolver, session) -> None:
        resolver.resolve_street("MG", "Santa Rita", "Centro", "Rua A", None, tenant_id=TENANT)
        resolver.resolve_street("PR", "Santa Rita", "Centro", "Rua A", None, tenant_id=TENANT)

        assert _count(session, City) == 2
        assert _count(session, Street) == 2

    def test_blank_postal_code_matches_missing_postal_code(self, resolver, session) -> None:
        without = resolver.resolve_street("RJ", "Niterói", "Icaraí", "Rua B", None, tenant_id=TENANT)
        blank = resolver.resolve_street("RJ", "Niterói", "Icaraí", "Rua B", "  ", tenant_id=TENANT)
        other = resolver.resolve_street("RJ", "Niterói", "Icaraí", "Rua B", "24220-000", tenant_id=TENANT)

        assert without == blank
        assert other != without
        assert session.get(Street, without).postal_code is None

    def test_unknown_state_name(self, resolver) -> None:
        with pytest.raises(AddressNotFoundError, match="Atlantis"):
            resolver.resolve_street("Atlantis", "X", "Y", "Z", None, tenant_id=TENANT)

    def test_unseeded_state_code(self, resolver, session) -> None:
        with pytest.raises(AddressNotFoundError):
            resolver.resolve_street("ZZ", "X", "Y", "Z", None, tenant_id=TENANT)
        assert _count(session, City) == 0

    @pytest.mark.parametrize(
        ("city", "neighborhood", "street"),
        [("", "Centro", "Rua A"), ("Campinas", " ", "Rua A"), ("Campinas", "Centro", "")],
    )
    def test_missing_parent_levels(self, resolver, city, neighborhood, street) -> None:
        with pytest.raises(AddressDependencyError):
            resolver.resolve_street("SP", city, neighborhood, street, None, tenant_id=TENANT)

    def test_failed_create_reports_its_level(self, store, session) -> None:
        resolver = AddressHierarchyResolver(FailingCreateStore(store, "neighborhoods"))

        with pytest.raises(AddressLevelError) as excinfo:
            resolver.resolve_street("SP", "Campinas", "Centro", "Rua A", None, tenant_id=TENANT)

        assert excinfo.value.level == "neighborhood"
        # the city created before the failure stays
        assert _count(session, City) == 1

    def test_created_levels_are_logged(self, resolver, session, caplog) -> None:
        with caplog.at_level(logging.INFO, logger="fleetdesk.services.address_resolver"):
            street_id = resolver.resolve_street("IL", "Springfield", "Downtown", "Main Street", None, tenant_id=TENANT)

        assert session.get(Street, street_id).name == "Main Street"
        created = [
            json.loads(record.getMessage())
            for record in caplog.records
            if record.name == "fleetdesk.services.address_resolver"
        ]
        assert [entry["address_level"] for entry in created] == ["city", "neighborhood", "street"]
        assert all(entry["event"] == "address_level_created" for entry in created)
