"""
Database models for the note history service.

The users table is the account store: each row carries the serialized
history blob in its `history` column.
"""

from sqlalchemy import create_engine, Column, String, DateTime, Integer, Text
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from datetime import datetime
import uuid

from app.config import get_config
from history.note_ids import encode_note_id

Base = declarative_base()


class User(Base):
    """User account model."""
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    name = Column(String, nullable=False, default="")
    # JSON array of history entries; NULL until the first write
    history = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    last_login = Column(DateTime, nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "last_login": self.last_login.isoformat() if self.last_login else None,
        }


class Note(Base):
    """A note document."""
    __tablename__ = "notes"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    short_id = Column(String, unique=True, nullable=False,
                      default=lambda: uuid.uuid4().hex[:10])
    alias = Column(String, unique=True, nullable=True, index=True)
    owner_id = Column(String, nullable=True, index=True)
    permission = Column(String, nullable=False, default="freely")  # freely, editable, limited, locked, protected, private
    title = Column(String, nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    view_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)
    lastchange_at = Column(DateTime, nullable=True)

    def to_index_dict(self):
        """Fields listed in the notes index (no content)."""
        return {
            "id": encode_note_id(self.id),
            "alias": self.alias,
            "shortId": self.short_id,
            "title": self.title,
            "permission": self.permission,
            "viewcount": self.view_count,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "lastchangeAt": self.lastchange_at.isoformat() if self.lastchange_at else None,
        }

    def to_dict(self):
        result = self.to_index_dict()
        result["content"] = self.content
        return result


# Database setup
_engine = None
_SessionLocal = None


def get_engine():
    """Get or create database engine."""
    global _engine
    if _engine is None:
        url = get_config().database_url
        if url.startswith("sqlite"):
            kwargs = {"connect_args": {"check_same_thread": False}}
            # In-memory databases must share one connection across threads
            if url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
            _engine = create_engine(url, **kwargs)
        else:
            _engine = create_engine(url, pool_pre_ping=True)
    return _engine


def get_session():
    """Get a database session."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=get_engine())
    return _SessionLocal()


def init_db():
    """Initialize database tables."""
    Base.metadata.create_all(bind=get_engine())


def reset_db():
    """Drop and recreate all tables (for testing)."""
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
