# history/codec.py
"""
History blob codec.

The stored form is a JSON array of entry records; the in-memory form is a
HistoryCollection keyed by canonical note id. Decoding runs every id through
the IdentifierMigrator, and a later record with the same (migrated) id
replaces an earlier one.

Stored blobs are read leniently: only the array shape and each record's id
are required. Caller-supplied records (strict=True) must match
HistoryEntryRecord exactly.
"""

from __future__ import annotations

import json
from typing import Any, List, Optional

from pydantic import ValidationError

from history.errors import MalformedHistoryError
from history.migration import IdentifierMigrator
from history.models import (
    HistoryCollection,
    HistoryEntry,
    HistoryEntryRecord,
    StoredHistoryEntryRecord,
)


def decode(
    serialized: Optional[str],
    migrator: Optional[IdentifierMigrator] = None,
) -> HistoryCollection:
    """
    Decode a stored history blob.

    Args:
        serialized: JSON text, or None/"" when the user has no history yet
        migrator: Identifier migrator (a default one if not provided)

    Returns:
        HistoryCollection with migrated ids

    Raises:
        MalformedHistoryError: If the text is not a JSON array of records
    """
    if not serialized:
        return HistoryCollection()

    try:
        records = json.loads(serialized)
    except (TypeError, ValueError) as e:
        raise MalformedHistoryError(f"History is not valid JSON: {e}") from e

    return decode_records(records, migrator=migrator)


def decode_records(
    records: Any,
    migrator: Optional[IdentifierMigrator] = None,
    strict: bool = False,
) -> HistoryCollection:
    """
    Build a collection from already-parsed JSON records.

    Args:
        records: Parsed JSON value, expected to be a list of objects
        migrator: Identifier migrator (a default one if not provided)
        strict: Validate every field instead of coercing loose values
    """
    if not isinstance(records, list):
        raise MalformedHistoryError(
            f"History must be an array, got {type(records).__name__}"
        )

    migrator = migrator or IdentifierMigrator()
    schema = HistoryEntryRecord if strict else StoredHistoryEntryRecord
    collection = HistoryCollection()

    for index, raw in enumerate(records):
        if not isinstance(raw, dict):
            raise MalformedHistoryError(f"History entry {index} is not an object")
        try:
            record = schema.model_validate(raw)
        except ValidationError as e:
            raise MalformedHistoryError(f"History entry {index} is invalid: {e}") from e

        collection.put(HistoryEntry.from_record(record, note_id=migrator.migrate(record.id)))

    return collection


def to_records(collection: HistoryCollection) -> List[dict]:
    """Convert a collection to a list of stored record dicts."""
    return [entry.to_dict() for entry in collection]


def encode(collection: HistoryCollection) -> str:
    """Serialize a collection into the stored JSON array form."""
    return json.dumps(to_records(collection), separators=(",", ":"))
