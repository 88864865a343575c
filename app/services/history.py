"""
Wiring for the history service.

Builds the HistoryService over the SQL account store with the configured
legacy id length floor.
"""

import logging
from typing import Optional

from app.config import get_config
from app.services.accounts import SqlAccountStore
from history import HistoryService, HistoryStore, IdentifierMigrator

_logger = logging.getLogger("history")

# Module-level singleton service
_service: Optional[HistoryService] = None


def build_history_service(length_floor: Optional[int] = None) -> HistoryService:
    """Create a HistoryService backed by the users table."""
    if length_floor is None:
        length_floor = get_config().legacy_id_length_floor
    migrator = IdentifierMigrator(length_floor=length_floor, logger=_logger)
    store = HistoryStore(SqlAccountStore(), migrator=migrator, logger=_logger)
    return HistoryService(store, logger=_logger)


def get_history_service() -> HistoryService:
    """Get the global history service singleton."""
    global _service
    if _service is None:
        _service = build_history_service()
    return _service
