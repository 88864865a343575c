"""
Account store backed by the users table.

Implements the AccountStore protocol used by history.store.HistoryStore.
SQLAlchemy errors propagate; the history store turns them into
StorageUnavailableError.
"""

import logging
from typing import Optional

from app.models import User, get_session
from history.store import AccountRecord

_logger = logging.getLogger(__name__)


class SqlAccountStore:
    """Reads and writes the history column of user rows."""

    def find_user(self, user_id: str) -> Optional[AccountRecord]:
        db = get_session()
        try:
            user = db.query(User).filter(User.id == user_id).first()
            if not user:
                return None
            return AccountRecord(id=user.id, history=user.history)
        finally:
            db.close()

    def update_user_history(self, user_id: str, serialized: str) -> bool:
        db = get_session()
        try:
            count = (
                db.query(User)
                .filter(User.id == user_id)
                .update({User.history: serialized}, synchronize_session=False)
            )
            db.commit()
            return count > 0
        except Exception as e:
            _logger.warning(f"rolling back history update for {user_id}: {e}")
            db.rollback()
            raise
        finally:
            db.close()
