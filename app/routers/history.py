# app/routers/history.py
"""
History endpoints.

GET    /history            full history of the caller
POST   /history            replace the whole history
POST   /history/{note_id}  set the pin flag of one entry
DELETE /history            clear all
DELETE /history/{note_id}  delete one entry

All endpoints require an authenticated caller.
"""

import logging
from typing import Any, Optional, Union

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from app.correlation import get_request_id
from app.models import User
from app.responses import error_response, history_error_response
from app.security import get_required_user
from app.services.history import get_history_service
from history.errors import HistoryError

_logger = logging.getLogger(__name__)

router = APIRouter(tags=["history"])


# =============================================================================
# Request Schemas
# =============================================================================

class HistoryReplaceRequest(BaseModel):
    # JSON array text (as older clients send it) or the array itself
    history: Any = None


class PinRequest(BaseModel):
    pinned: Optional[Union[bool, str]] = None


def _parse_pinned(value: Optional[Union[bool, str]]) -> Optional[bool]:
    """Accept true/false or the strings "true"/"false"; anything else is invalid."""
    if isinstance(value, bool):
        return value
    if value == "true":
        return True
    if value == "false":
        return False
    return None


# =============================================================================
# Routes
# =============================================================================

@router.get("/history")
async def get_history(raw_request: Request, user: User = Depends(get_required_user)):
    """
    Get the caller's history.

    Response:
        {
            "request_id": "...",
            "history": [{"id", "text", "time", "tags", "pinned"?}, ...]
        }
    """
    try:
        entries = get_history_service().get_history(user.id)
    except HistoryError as e:
        return history_error_response(raw_request, e)

    return {
        "request_id": get_request_id(raw_request) or "unknown",
        "history": [entry.to_dict() for entry in entries],
    }


@router.post("/history")
async def replace_history(
    request: HistoryReplaceRequest,
    raw_request: Request,
    user: User = Depends(get_required_user),
):
    """Replace the caller's whole history."""
    if request.history is None:
        return error_response(raw_request, 400)

    _logger.debug(f"received history from [{user.id}]")
    try:
        collection = get_history_service().replace_history(user.id, request.history)
    except HistoryError as e:
        return history_error_response(raw_request, e)

    return {
        "request_id": get_request_id(raw_request) or "unknown",
        "count": len(collection),
    }


@router.post("/history/{note_id}")
async def pin_history_entry(
    note_id: str,
    request: PinRequest,
    raw_request: Request,
    user: User = Depends(get_required_user),
):
    """Set the pin flag of one history entry."""
    pinned = _parse_pinned(request.pinned)
    if pinned is None:
        return error_response(raw_request, 400)

    try:
        entry = get_history_service().set_pinned(user.id, note_id, pinned)
    except HistoryError as e:
        return history_error_response(raw_request, e)

    return {
        "request_id": get_request_id(raw_request) or "unknown",
        "entry": entry.to_dict(),
    }


@router.delete("/history")
async def clear_history(raw_request: Request, user: User = Depends(get_required_user)):
    """Delete every history entry of the caller."""
    try:
        get_history_service().clear_history(user.id)
    except HistoryError as e:
        return history_error_response(raw_request, e)

    return {"request_id": get_request_id(raw_request) or "unknown"}


@router.delete("/history/{note_id}")
async def delete_history_entry(
    note_id: str,
    raw_request: Request,
    user: User = Depends(get_required_user),
):
    """Delete one history entry. Deleting a missing entry succeeds."""
    try:
        removed = get_history_service().delete_entry(user.id, note_id)
    except HistoryError as e:
        return history_error_response(raw_request, e)

    return {
        "request_id": get_request_id(raw_request) or "unknown",
        "removed": removed,
    }
