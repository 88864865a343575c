"""
FastAPI authentication dependencies.

Provides:
- Bearer token extraction
- Optional / required user dependencies for route handlers

Unauthenticated access to a protected route is answered with 403.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.models import User
from app.services.auth import get_current_user_from_token

# auto_error=False so missing credentials reach our own 403 handling
bearer_scheme = HTTPBearer(auto_error=False)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[User]:
    """
    FastAPI dependency: Get current user if logged in.

    Returns None for anonymous users (no error).
    """
    if credentials is None:
        return None
    return get_current_user_from_token(credentials.credentials)


async def get_required_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    """
    FastAPI dependency: Get current user (required).

    Raises 403 if not logged in.
    """
    if not user:
        raise HTTPException(status_code=403, detail="forbidden")
    return user
