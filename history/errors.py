# history/errors.py
"""
History error taxonomy.

Storage and not-found conditions propagate to the request boundary, which
maps them to generic caller-visible outcomes. Migration decode failures are
not represented here: they are absorbed inside the migrator and only affect
log severity.
"""

from __future__ import annotations


class HistoryError(Exception):
    """Base history error."""
    pass


class StorageUnavailableError(HistoryError):
    """The account store failed to read or write the history blob."""
    pass


class NotFoundError(HistoryError):
    """User record or history entry does not exist."""
    pass


class MalformedInputError(HistoryError):
    """Caller-supplied history data is not structurally valid."""
    pass


class MalformedHistoryError(HistoryError):
    """A serialized history blob is not a JSON array of entry records."""
    pass
