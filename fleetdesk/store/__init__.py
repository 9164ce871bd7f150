"""
fleetdesk/store package marker.
"""

from fleetdesk.store.base import RecordStore
from fleetdesk.store.errors import DuplicateKeyError, RecordStoreError, StoreError, UnknownTableError
from fleetdesk.store.sqlalchemy_store import SQLAlchemyRecordStore

__all__ = [
    "DuplicateKeyError",
    "RecordStore",
    "RecordStoreError",
    "SQLAlchemyRecordStore",
    "StoreError",
    "UnknownTableError",
]
