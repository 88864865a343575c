"""
Authentication service for the note history API.

Issues and verifies JWT bearer tokens; passwords are hashed with bcrypt.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional, Tuple
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from app.config import get_config
from app.models import User, get_session

_logger = logging.getLogger(__name__)

# JWT Configuration
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_DAYS = 7

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, get_config().jwt_secret, algorithm=ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """Decode JWT token."""
    try:
        payload = jwt.decode(token, get_config().jwt_secret, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None


def get_user_by_email(email: str, db: Session) -> Optional[User]:
    """Get user by email."""
    return db.query(User).filter(User.email == email.lower()).first()


def get_user_by_id(user_id: str) -> Optional[User]:
    """Get user by ID."""
    db = get_session()
    try:
        user = db.query(User).filter(User.id == user_id).first()
        if user:
            db.expunge(user)
        return user
    finally:
        db.close()


def register_user(email: str, password: str, name: str) -> Tuple[Optional[User], Optional[str]]:
    """
    Register a new user.

    Returns:
        (User, None) on success
        (None, error_message) on failure
    """
    if len(password) < 8:
        return None, "Password must be at least 8 characters"

    db = get_session()
    try:
        if get_user_by_email(email, db):
            return None, "Email already registered"

        user = User(
            email=email.lower(),
            password_hash=get_password_hash(password),
            name=name,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        db.expunge(user)
    finally:
        db.close()

    _logger.info(f"Registered user: {user.id}")
    return user, None


def authenticate_user(email: str, password: str) -> Tuple[Optional[User], Optional[str]]:
    """
    Authenticate user with email/password.

    Returns:
        (User, None) on success
        (None, error_message) on failure
    """
    db = get_session()
    try:
        user = get_user_by_email(email, db)
        if not user or not verify_password(password, user.password_hash):
            _logger.warning("Failed login attempt")
            return None, "Invalid email or password"

        user.last_login = datetime.utcnow()
        db.commit()
        db.refresh(user)
        db.expunge(user)
    finally:
        db.close()

    return user, None


def get_current_user_from_token(token: Optional[str]) -> Optional[User]:
    """Get user from JWT token."""
    if not token:
        return None

    payload = decode_token(token)
    if not payload:
        return None

    user_id = payload.get("sub")
    if not user_id:
        return None

    return get_user_by_id(user_id)
