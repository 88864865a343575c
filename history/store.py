# history/store.py
"""
History store adapter.

Reads and writes a user's history blob through the account store. Both
directions are full-blob: persist() always rewrites the whole history.
Concurrent persists for the same user are not coordinated; the last write
wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from history import codec
from history.errors import MalformedHistoryError, NotFoundError, StorageUnavailableError
from history.migration import IdentifierMigrator
from history.models import HistoryCollection

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccountRecord:
    """The slice of a user account the history store needs."""
    id: str
    history: Optional[str] = None


class AccountStore(Protocol):
    """Account store collaborator."""

    def find_user(self, user_id: str) -> Optional[AccountRecord]:
        ...

    def update_user_history(self, user_id: str, serialized: str) -> bool:
        ...


class HistoryStore:
    """Fetches and persists HistoryCollections for users."""

    def __init__(
        self,
        accounts: AccountStore,
        migrator: Optional[IdentifierMigrator] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._accounts = accounts
        self._logger = logger or _logger
        self._migrator = migrator or IdentifierMigrator(logger=self._logger)

    @property
    def migrator(self) -> IdentifierMigrator:
        return self._migrator

    def fetch(self, user_id: str) -> HistoryCollection:
        """
        Load a user's history.

        Raises:
            NotFoundError: If the user does not exist
            StorageUnavailableError: If the account store fails
            MalformedHistoryError: If the stored blob is corrupt
        """
        try:
            account = self._accounts.find_user(user_id)
        except Exception as e:
            self._logger.error(f"read history failed: {user_id}: {e}")
            raise StorageUnavailableError("read history failed") from e

        if account is None:
            raise NotFoundError(f"User {user_id} not found")

        if not account.history:
            self._logger.debug(f"read empty history: {user_id}")
            return HistoryCollection()

        try:
            collection = codec.decode(account.history, migrator=self._migrator)
        except MalformedHistoryError as e:
            self._logger.error(f"stored history is corrupt: {user_id}: {e}")
            raise

        self._logger.debug(f"read history success: {user_id}")
        return collection

    def persist(self, user_id: str, collection: HistoryCollection) -> None:
        """
        Write the full history for a user.

        Raises:
            NotFoundError: If no user row was updated
            StorageUnavailableError: If the account store fails
        """
        serialized = codec.encode(collection)
        try:
            updated = self._accounts.update_user_history(user_id, serialized)
        except Exception as e:
            self._logger.error(f"set history failed: {user_id}: {e}")
            raise StorageUnavailableError("set history failed") from e

        if not updated:
            raise NotFoundError(f"User {user_id} not found")
        self._logger.debug(f"set history success: {user_id} ({len(collection)} entries)")
