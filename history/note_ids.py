# history/note_ids.py
"""
Canonical note identifier encoding.

Notes are keyed by UUID in the database. Everywhere a note id leaves the
server (URLs, history entries) it is written as the base64url encoding of
the 16 UUID bytes, without padding, which yields a 22-character string.
"""

from __future__ import annotations

import base64
import re
import uuid

# 8-4-4-4-12 hex groups
NOTE_ID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)

ENCODED_NOTE_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{22}$")

UUID_STRING_LENGTH = 36


def check_note_id_valid(note_id: str) -> bool:
    """Return True if note_id is a UUID string."""
    if not isinstance(note_id, str):
        return False
    return bool(NOTE_ID_PATTERN.match(note_id))


def encode_note_id(note_id: str) -> str:
    """
    Encode a UUID string into the canonical base64url form.

    Args:
        note_id: UUID string (with dashes)

    Returns:
        22-character base64url string

    Raises:
        ValueError: If note_id is not a UUID string
    """
    if not check_note_id_valid(note_id):
        raise ValueError(f"Invalid note id: {note_id!r}")
    raw = uuid.UUID(note_id).bytes
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def decode_note_id(encoded: str) -> str:
    """
    Decode a canonical base64url note id back into a UUID string.

    Raises:
        ValueError: If encoded is not a valid canonical note id
    """
    if not isinstance(encoded, str) or not ENCODED_NOTE_ID_PATTERN.match(encoded):
        raise ValueError(f"Invalid encoded note id: {encoded!r}")
    try:
        raw = base64.urlsafe_b64decode(encoded + "==")
    except (ValueError, TypeError) as e:
        raise ValueError(f"Invalid encoded note id: {encoded!r}") from e
    if len(raw) != 16:
        raise ValueError(f"Invalid encoded note id: {encoded!r}")
    return str(uuid.UUID(bytes=raw))
