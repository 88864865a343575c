"""
Authentication API endpoints.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr
from typing import Optional

from app.models import User
from app.security import get_required_user
from app.services.auth import (
    register_user,
    authenticate_user,
    create_access_token,
)

router = APIRouter(prefix="/api/auth", tags=["auth"])


# =============================================================================
# Request/Response Schemas
# =============================================================================

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    name: str = ""


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class AuthResponse(BaseModel):
    success: bool
    user: Optional[dict] = None
    token: Optional[str] = None
    error: Optional[str] = None


class UserResponse(BaseModel):
    id: str
    email: str
    name: str


# =============================================================================
# Routes
# =============================================================================

@router.post("/register", response_model=AuthResponse)
async def register(request: RegisterRequest):
    """Register a new user account."""
    user, error = register_user(
        email=request.email,
        password=request.password,
        name=request.name
    )

    if error:
        return AuthResponse(success=False, error=error)

    token = create_access_token({"sub": user.id})

    return AuthResponse(
        success=True,
        user=user.to_dict(),
        token=token
    )


@router.post("/login", response_model=AuthResponse)
async def login(request: LoginRequest):
    """Login with email/password."""
    user, error = authenticate_user(
        email=request.email,
        password=request.password
    )

    if error:
        return AuthResponse(success=False, error=error)

    token = create_access_token({"sub": user.id})

    return AuthResponse(
        success=True,
        user=user.to_dict(),
        token=token
    )


@router.get("/me", response_model=UserResponse)
async def get_me(user: User = Depends(get_required_user)):
    """Get current user info."""
    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
    )
