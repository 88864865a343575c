"""Shared fixtures for API tests."""
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.models import User, get_session, reset_db
from app.services.auth import create_access_token


@pytest.fixture(autouse=True)
def reset_database():
    """Fresh tables for every test."""
    reset_db()
    yield
    reset_db()


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def make_user():
    """Create a user row and return (user_id, auth headers)."""

    def _make_user(email="alice@example.com", history=None):
        db = get_session()
        try:
            user = User(email=email, password_hash="not-a-real-hash", name="Alice", history=history)
            db.add(user)
            db.commit()
            user_id = user.id
        finally:
            db.close()
        token = create_access_token({"sub": user_id})
        return user_id, {"Authorization": f"Bearer {token}"}

    return _make_user


@pytest.fixture
def history_blob():
    """Read the raw history column of a user."""

    def _history_blob(user_id):
        db = get_session()
        try:
            return db.query(User).filter(User.id == user_id).first().history
        finally:
            db.close()

    return _history_blob
