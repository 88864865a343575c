# history/engine.py
"""
History mutation rules.

Each function applies one logical change to a HistoryCollection in memory.
Persisting the result is the caller's job (HistoryStore.persist), once per
request.
"""

from __future__ import annotations

import time
from typing import Iterable, List, Optional

from history.errors import NotFoundError
from history.models import HistoryCollection, HistoryEntry


def now_ms() -> int:
    """Current time in milliseconds since epoch."""
    return int(time.time() * 1000)


def touch(
    collection: HistoryCollection,
    note_id: str,
    label: str,
    tags: Optional[List[str]] = None,
    timestamp: Optional[int] = None,
) -> HistoryEntry:
    """
    Record a visit to a note.

    Creates the entry if missing, otherwise updates text, tags and time in
    place. An existing pin flag is kept; new entries have none.

    Args:
        collection: History to update
        note_id: Canonical note id
        label: Note title at time of visit
        tags: Note tags at time of visit
        timestamp: Visit time in ms (defaults to now)

    Returns:
        The touched entry
    """
    entry = collection.get(note_id) or HistoryEntry(id=note_id)
    entry.text = label
    entry.tags = list(tags or [])
    entry.time = timestamp if timestamp is not None else now_ms()
    return collection.put(entry)


def set_pinned(collection: HistoryCollection, note_id: str, pinned: bool) -> HistoryEntry:
    """
    Set the pin flag on an existing entry.

    Raises:
        NotFoundError: If there is no entry for note_id
    """
    entry = collection.get(note_id)
    if entry is None:
        raise NotFoundError(f"History entry {note_id} not found")
    entry.pinned = bool(pinned)
    return entry


def remove(collection: HistoryCollection, note_id: str) -> bool:
    """Delete an entry. Deleting a missing entry is not an error."""
    return collection.discard(note_id)


def replace_all(
    collection: HistoryCollection,
    entries: Iterable[HistoryEntry],
) -> HistoryCollection:
    """Discard every entry and rebuild from entries (empty means clear all)."""
    replacement = list(entries)
    collection.clear()
    for entry in replacement:
        collection.put(entry)
    return collection
