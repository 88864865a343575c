# app/routers/notes.py
"""
Note endpoints.

GET /notes            index of notes visible to the caller
GET /notes/{note_id}  open a note; a logged-in caller gets a history entry
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request

from app.correlation import get_request_id
from app.models import User
from app.responses import error_response
from app.security import get_optional_user, get_required_user
from app.services.history import get_history_service
from app.services.notes import list_visible_notes, open_note, parse_note_info
from history.note_ids import encode_note_id

_logger = logging.getLogger(__name__)

router = APIRouter(tags=["notes"])


@router.get("/notes")
async def notes_index(raw_request: Request, user: User = Depends(get_required_user)):
    """List notes with content that are public or owned by the caller."""
    try:
        notes = list_visible_notes(user.id)
    except Exception as e:
        _logger.error(f"read index failed: {e}")
        return error_response(raw_request, 500)

    return {
        "request_id": get_request_id(raw_request) or "unknown",
        "index": notes,
    }


@router.get("/notes/{note_id}")
async def get_note(
    note_id: str,
    raw_request: Request,
    user: Optional[User] = Depends(get_optional_user),
):
    """
    Open a note by encoded id, UUID or alias.

    Records the visit in the caller's history when logged in.
    """
    user_id = user.id if user else None
    note = open_note(note_id, user_id)
    if note is None:
        return error_response(raw_request, 404)

    if user_id:
        info = parse_note_info(note.content)
        get_history_service().record_visit(
            user_id, encode_note_id(note.id), info.title, info.tags
        )

    return {
        "request_id": get_request_id(raw_request) or "unknown",
        "note": note.to_dict(),
    }
