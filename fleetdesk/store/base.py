"""
Record store interface consumed by the import pipeline.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

Record = dict[str, Any]


class RecordStore(ABC):
    """
    Table-oriented create/read/update access.

    ``tenant_id`` is passed on every call. Tables owned by an organization
    are read and written only within that tenant; shared reference tables
    ignore it. Each call stands alone: there is no transaction spanning two
    calls, so a find followed by a create is not atomic.
    """

    @abstractmethod
    def create(self, table: str, fields: Mapping[str, Any], *, tenant_id: int | None) -> Record:
        """
        Insert one record and return it with its store-assigned id.

        Raises DuplicateKeyError on a unique-key collision and StoreError on
        any other failure.
        """

    @abstractmethod
    def find_one(self, table: str, match: Mapping[str, Any], *, tenant_id: int | None) -> Record | None:
        """
        Return the first record whose fields equal ``match`` (None matches
        NULL), or None.
        """

    @abstractmethod
    def update(
        self,
        table: str,
        match: Mapping[str, Any],
        patch: Mapping[str, Any],
        *,
        tenant_id: int | None,
    ) -> int:
        """
        Apply ``patch`` to every record matching ``match`` and return the
        number of records changed.
        """
