# history/__init__.py
"""
Per-user note history.

Provides:
- History entry / collection models
- Legacy note id migration
- Blob codec
- Mutation rules (touch, pin, delete, replace)
- Store adapter and service over the account store
"""

from history.errors import (
    HistoryError,
    StorageUnavailableError,
    NotFoundError,
    MalformedInputError,
    MalformedHistoryError,
)
from history.migration import IdentifierMigrator, MigrationOutcome, MigrationResult
from history.models import (
    HistoryEntry,
    HistoryCollection,
    HistoryEntryRecord,
    StoredHistoryEntryRecord,
)
from history.service import HistoryService
from history.store import AccountRecord, AccountStore, HistoryStore

__all__ = [
    "HistoryError",
    "StorageUnavailableError",
    "NotFoundError",
    "MalformedInputError",
    "MalformedHistoryError",
    "IdentifierMigrator",
    "MigrationOutcome",
    "MigrationResult",
    "HistoryEntry",
    "HistoryCollection",
    "HistoryEntryRecord",
    "StoredHistoryEntryRecord",
    "HistoryService",
    "AccountRecord",
    "AccountStore",
    "HistoryStore",
]
