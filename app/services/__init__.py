"""
Services module for business logic.
"""

from app.services.accounts import SqlAccountStore
from app.services.history import get_history_service
from app.services.notes import NoteInfo, parse_note_info

__all__ = [
    "SqlAccountStore",
    "get_history_service",
    "NoteInfo",
    "parse_note_info",
]
