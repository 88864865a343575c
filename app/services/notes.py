"""
Note metadata and lookup.

parse_note_info() derives the title and tags recorded in history when a user
opens a note. Title and tags come from YAML front matter when present, and
otherwise from the markdown body.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

import yaml
from sqlalchemy import or_

from app.models import Note, get_session
from history.note_ids import check_note_id_valid, decode_note_id

_logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled"

FRONT_MATTER_PATTERN = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n(?:---|\.\.\.)[ \t]*(?:\r?\n|\Z)", re.DOTALL)
HEADING_PATTERN = re.compile(r"^#[ \t]+(.+?)[ \t#]*$", re.MULTILINE)
TAGS_LINE_PATTERN = re.compile(r"^#{6}[ \t]+tags:[ \t]*(.*)$", re.MULTILINE | re.IGNORECASE)
INLINE_CODE_PATTERN = re.compile(r"`([^`]+)`")


@dataclass
class NoteInfo:
    title: str = DEFAULT_TITLE
    tags: List[str] = field(default_factory=list)


def _dedupe(tags: List[str]) -> List[str]:
    seen = set()
    result = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result


def _parse_front_matter(content: str) -> tuple[dict, str]:
    """Split YAML front matter from the body. Invalid YAML is treated as absent."""
    match = FRONT_MATTER_PATTERN.match(content)
    if not match:
        return {}, content
    try:
        meta = yaml.safe_load(match.group(1))
    except yaml.YAMLError as e:
        _logger.debug(f"Ignoring invalid front matter: {e}")
        return {}, content
    if not isinstance(meta, dict):
        return {}, content
    return meta, content[match.end():]


def _meta_tags(value) -> List[str]:
    if isinstance(value, str):
        return value.split(",")
    if isinstance(value, list):
        return [str(v) for v in value if v is not None]
    return []


def parse_note_info(content: Optional[str]) -> NoteInfo:
    """
    Extract the title and tags of a note.

    Args:
        content: Markdown source of the note

    Returns:
        NoteInfo with title (default "Untitled") and de-duplicated tags
    """
    if not content:
        return NoteInfo()

    meta, body = _parse_front_matter(content)

    title = meta.get("title")
    if not isinstance(title, str) or not title.strip():
        heading = HEADING_PATTERN.search(body)
        title = heading.group(1) if heading else DEFAULT_TITLE

    if "tags" in meta:
        tags = _meta_tags(meta["tags"])
    else:
        tags_line = TAGS_LINE_PATTERN.search(body)
        tags = INLINE_CODE_PATTERN.findall(tags_line.group(1)) if tags_line else []

    return NoteInfo(title=title.strip(), tags=_dedupe(tags))


def _lookup_note(db, note_id: str) -> Optional[Note]:
    if check_note_id_valid(note_id):
        note = db.query(Note).filter(Note.id == note_id.lower()).first()
        if note:
            return note

    try:
        note = db.query(Note).filter(Note.id == decode_note_id(note_id)).first()
        if note:
            return note
    except ValueError:
        pass

    return db.query(Note).filter(Note.alias == note_id).first()


def find_note(note_id: str) -> Optional[Note]:
    """Look up a note by canonical encoded id, raw UUID, or alias."""
    db = get_session()
    try:
        note = _lookup_note(db, note_id)
        if note:
            db.expunge(note)
        return note
    finally:
        db.close()


def open_note(note_id: str, user_id: Optional[str] = None) -> Optional[Note]:
    """
    Look up a note the caller may view and count the view.

    Returns None, without counting, when the note is missing or private to
    someone else.
    """
    db = get_session()
    try:
        note = _lookup_note(db, note_id)
        if not note or not can_view(note, user_id):
            return None
        note.view_count = (note.view_count or 0) + 1
        db.commit()
        db.refresh(note)
        db.expunge(note)
        return note
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def can_view(note: Note, user_id: Optional[str]) -> bool:
    """Private notes are visible to their owner only."""
    if note.permission != "private":
        return True
    return user_id is not None and note.owner_id == user_id


def create_note(
    content: str,
    owner_id: Optional[str] = None,
    alias: Optional[str] = None,
    permission: str = "freely",
) -> Note:
    """Create and store a note; the title is derived from its content."""
    db = get_session()
    try:
        note = Note(
            content=content,
            owner_id=owner_id,
            alias=alias,
            permission=permission,
            title=parse_note_info(content).title,
            lastchange_at=datetime.utcnow(),
        )
        db.add(note)
        db.commit()
        db.refresh(note)
        db.expunge(note)
        return note
    finally:
        db.close()


def list_visible_notes(user_id: str) -> List[dict]:
    """
    List notes the user may see in the index.

    A note is listed if it has content and is either not private or owned by
    the user.
    """
    db = get_session()
    try:
        notes = (
            db.query(Note)
            .filter(Note.content != "")
            .filter(or_(Note.permission != "private", Note.owner_id == user_id))
            .all()
        )
        _logger.debug(f"read index success: {user_id}")
        return [note.to_index_dict() for note in notes]
    finally:
        db.close()
