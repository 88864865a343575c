# history/models.py
"""
History entry and collection models.

HistoryEntry is the in-memory form of one visited note. HistoryEntryRecord is
the pydantic schema of the stored/wire record and keeps the field names used
by existing blobs: id, text, time, tags, pinned.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class HistoryEntryRecord(BaseModel):
    """Validated wire record for a single history entry."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    text: str = ""
    time: int = 0
    tags: List[str] = Field(default_factory=list)
    pinned: Optional[bool] = None


class StoredHistoryEntryRecord(HistoryEntryRecord):
    """
    Record read back from a stored blob.

    Blobs written by older clients carry formatted time strings, null text
    or tags, and other loose values. Only the id is required; every other
    field is coerced to its default when it cannot be used as is.
    """

    @field_validator("text", mode="before")
    @classmethod
    def _coerce_text(cls, value):
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @field_validator("time", mode="before")
    @classmethod
    def _coerce_time(cls, value):
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            return 0
        try:
            return int(float(value))
        except (ValueError, OverflowError):
            return 0

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value):
        if isinstance(value, str):
            return [value]
        if not isinstance(value, list):
            return []
        return [str(tag) for tag in value if tag is not None]

    @field_validator("pinned", mode="before")
    @classmethod
    def _coerce_pinned(cls, value):
        if value is None or isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ("true", "false"):
            return value.lower() == "true"
        return None


@dataclass
class HistoryEntry:
    """
    One visited note.

    Attributes:
        id: Canonical note identifier
        text: Display label (note title at last visit)
        time: Last access, milliseconds since epoch
        tags: Note tags, display order preserved
        pinned: Pin flag; None means never set
    """
    id: str
    text: str = ""
    time: int = 0
    tags: List[str] = field(default_factory=list)
    pinned: Optional[bool] = None

    def __setattr__(self, name, value):
        # id is the collection key; it is fixed once set.
        if name == "id" and "id" in self.__dict__:
            raise AttributeError("HistoryEntry.id is read-only")
        super().__setattr__(name, value)

    @classmethod
    def from_record(cls, record: HistoryEntryRecord, note_id: Optional[str] = None) -> HistoryEntry:
        return cls(
            id=note_id if note_id is not None else record.id,
            text=record.text,
            time=record.time,
            tags=list(record.tags),
            pinned=record.pinned,
        )

    @property
    def is_pinned(self) -> bool:
        return bool(self.pinned)

    def to_dict(self) -> dict:
        """Convert to the stored record shape (pinned omitted when unset)."""
        result = {
            "id": self.id,
            "text": self.text,
            "time": self.time,
            "tags": list(self.tags),
        }
        if self.pinned is not None:
            result["pinned"] = self.pinned
        return result


class HistoryCollection:
    """
    A user's history keyed by canonical note id.

    Entries can only be stored under their own id, and HistoryEntry.id is
    read-only, so the key always equals entry.id. Iteration order is
    insertion order and carries no meaning.
    """

    def __init__(self, entries: Optional[Iterable[HistoryEntry]] = None):
        self._entries: Dict[str, HistoryEntry] = {}
        for entry in entries or ():
            self.put(entry)

    def put(self, entry: HistoryEntry) -> HistoryEntry:
        """Insert or overwrite the entry stored under entry.id."""
        self._entries[entry.id] = entry
        return entry

    def get(self, note_id: str) -> Optional[HistoryEntry]:
        return self._entries.get(note_id)

    def discard(self, note_id: str) -> bool:
        """Remove an entry if present. Returns True if something was removed."""
        return self._entries.pop(note_id, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> List[str]:
        return list(self._entries.keys())

    def entries(self) -> List[HistoryEntry]:
        return list(self._entries.values())

    def __contains__(self, note_id: object) -> bool:
        return note_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(list(self._entries.values()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HistoryCollection):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"HistoryCollection({len(self._entries)} entries)"
