# history/service.py
"""
History service - entry point for history operations.

Each method runs one read-modify-write cycle:
fetch -> decode (with id migration) -> engine mutation -> encode -> persist.
"""

from __future__ import annotations

import json
import logging
from typing import Any, List, Optional

from history import codec, engine
from history.errors import HistoryError, MalformedHistoryError, MalformedInputError
from history.models import HistoryCollection, HistoryEntry
from history.store import HistoryStore

_logger = logging.getLogger(__name__)


class HistoryService:
    """
    History operations for request handlers.

    Stateless apart from its collaborators; a collection never outlives the
    call that loaded it.
    """

    def __init__(self, store: HistoryStore, logger: Optional[logging.Logger] = None):
        self._store = store
        self._logger = logger or _logger

    def get_history(self, user_id: str) -> List[HistoryEntry]:
        """Return all history entries for a user."""
        return self._store.fetch(user_id).entries()

    def replace_history(self, user_id: str, payload: Any) -> HistoryCollection:
        """
        Replace a user's whole history with caller-supplied records.

        Args:
            user_id: User ID
            payload: JSON array text, or an already-parsed list of records

        Raises:
            MalformedInputError: If payload is not an array of valid records
        """
        if isinstance(payload, str):
            try:
                payload = json.loads(payload)
            except ValueError as e:
                raise MalformedInputError("history is not valid JSON") from e

        try:
            incoming = codec.decode_records(
                payload, migrator=self._store.migrator, strict=True
            )
        except MalformedHistoryError as e:
            raise MalformedInputError(str(e)) from e

        collection = engine.replace_all(HistoryCollection(), incoming.entries())
        self._store.persist(user_id, collection)
        self._logger.debug(f"replaced history for {user_id}: {len(collection)} entries")
        return collection

    def set_pinned(self, user_id: str, note_id: str, pinned: bool) -> HistoryEntry:
        """Pin or unpin one entry. Raises NotFoundError if it is absent."""
        collection = self._store.fetch(user_id)
        entry = engine.set_pinned(collection, note_id, pinned)
        self._store.persist(user_id, collection)
        return entry

    def delete_entry(self, user_id: str, note_id: str) -> bool:
        """Delete one entry (idempotent)."""
        collection = self._store.fetch(user_id)
        removed = engine.remove(collection, note_id)
        self._store.persist(user_id, collection)
        return removed

    def clear_history(self, user_id: str) -> None:
        """Delete every entry."""
        collection = engine.replace_all(HistoryCollection(), [])
        self._store.persist(user_id, collection)

    def record_visit(
        self,
        user_id: str,
        note_id: str,
        title: str,
        tags: Optional[List[str]] = None,
        timestamp: Optional[int] = None,
    ) -> bool:
        """
        Touch the history entry for a note the user just opened.

        Failures are logged, not raised: a visit must not break the request
        that triggered it.

        Returns:
            True if the history was updated
        """
        if not user_id or not note_id:
            return False
        try:
            collection = self._store.fetch(user_id)
            engine.touch(collection, note_id, title, tags, timestamp)
            self._store.persist(user_id, collection)
        except HistoryError as e:
            self._logger.warning(f"update history failed: {user_id} {note_id}: {e}")
            return False
        return True
