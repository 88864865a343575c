# app/tests/test_notes.py
"""Tests for note metadata parsing and the /notes endpoints."""
import json

import pytest

from app.services.notes import create_note, find_note, parse_note_info
from history.note_ids import encode_note_id


# =============================================================================
# parse_note_info
# =============================================================================


class TestParseNoteInfo:
    def test_empty_content(self):
        info = parse_note_info("")

        assert info.title == "Untitled"
        assert info.tags == []

    def test_title_from_heading(self):
        info = parse_note_info("intro\n\n# Meeting notes\n\nbody\n# Second")

        assert info.title == "Meeting notes"

    def test_subheading_is_not_title(self):
        assert parse_note_info("## Only a subheading").title == "Untitled"

    def test_front_matter_title_wins(self):
        content = "---\ntitle: From meta\n---\n# From heading\n"

        assert parse_note_info(content).title == "From meta"

    def test_front_matter_tag_list(self):
        content = "---\ntags: [work, ideas, work]\n---\n# T\n"

        assert parse_note_info(content).tags == ["work", "ideas"]

    def test_front_matter_tag_string(self):
        content = "---\ntags: work, ideas\n---\n"

        assert parse_note_info(content).tags == ["work", "ideas"]

    def test_tags_line(self):
        content = "# Title\n###### tags: `alpha` `beta`\n"

        info = parse_note_info(content)

        assert info.title == "Title"
        assert info.tags == ["alpha", "beta"]

    def test_invalid_front_matter_ignored(self):
        content = "---\ntitle: [unclosed\n---\n# Fallback\n"

        assert parse_note_info(content).title == "Fallback"


# =============================================================================
# Endpoints
# =============================================================================


@pytest.fixture
def note():
    return create_note("# Shopping\n###### tags: `home`\n", alias="shopping")


class TestFindNote:
    def test_by_encoded_id(self, note):
        assert find_note(encode_note_id(note.id)).id == note.id

    def test_by_uuid(self, note):
        assert find_note(note.id).id == note.id

    def test_by_alias(self, note):
        assert find_note("shopping").id == note.id

    def test_unknown(self, note):
        assert find_note("nothing-here") is None


class TestNoteView:
    def test_view_records_history(self, client, make_user, note, history_blob):
        user_id, headers = make_user()

        response = client.get(f"/notes/{encode_note_id(note.id)}", headers=headers)

        assert response.status_code == 200
        stored = json.loads(history_blob(user_id))
        assert len(stored) == 1
        assert stored[0]["id"] == encode_note_id(note.id)
        assert stored[0]["text"] == "Shopping"
        assert stored[0]["tags"] == ["home"]
        assert stored[0]["time"] > 0

    def test_view_keeps_pin(self, client, make_user, note, history_blob):
        note_id = encode_note_id(note.id)
        user_id, headers = make_user(
            history=json.dumps([{"id": note_id, "text": "Old", "time": 1, "tags": [], "pinned": True}])
        )

        client.get("/notes/shopping", headers=headers)

        stored = json.loads(history_blob(user_id))
        assert stored[0]["pinned"] is True
        assert stored[0]["text"] == "Shopping"

    def test_anonymous_view(self, client, note):
        response = client.get(f"/notes/{note.id}")

        assert response.status_code == 200
        assert response.json()["note"]["title"] == "Shopping"

    def test_view_counts(self, client, note):
        client.get("/notes/shopping")
        response = client.get("/notes/shopping")

        assert response.json()["note"]["viewcount"] == 2

    def test_unknown_note(self, client):
        response = client.get("/notes/missing")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_private_note_hidden_from_others(self, client, make_user):
        owner_id, _ = make_user(email="owner@example.com")
        _, headers = make_user(email="other@example.com")
        private = create_note("# Secret", owner_id=owner_id, permission="private")

        response = client.get(f"/notes/{private.id}", headers=headers)

        assert response.status_code == 404

    def test_hidden_view_is_not_counted(self, client, make_user):
        owner_id, owner_headers = make_user(email="owner@example.com")
        _, headers = make_user(email="other@example.com")
        private = create_note("# Secret", owner_id=owner_id, permission="private")

        client.get(f"/notes/{private.id}", headers=headers)
        client.get(f"/notes/{private.id}")

        assert find_note(private.id).view_count == 0
        response = client.get(f"/notes/{private.id}", headers=owner_headers)
        assert response.json()["note"]["viewcount"] == 1


class TestNotesIndex:
    def test_requires_auth(self, client):
        assert client.get("/notes").status_code == 403

    def test_lists_visible_notes(self, client, make_user):
        owner_id, owner_headers = make_user(email="owner@example.com")
        _, other_headers = make_user(email="other@example.com")
        create_note("# Public")
        create_note("# Mine", owner_id=owner_id, permission="private")
        create_note("")

        owner_titles = {n["title"] for n in client.get("/notes", headers=owner_headers).json()["index"]}
        other_titles = {n["title"] for n in client.get("/notes", headers=other_headers).json()["index"]}

        assert owner_titles == {"Public", "Mine"}
        assert other_titles == {"Public"}

    def test_index_omits_content(self, client, make_user, note):
        _, headers = make_user()

        index = client.get("/notes", headers=headers).json()["index"]

        assert "content" not in index[0]
        assert index[0]["id"] == encode_note_id(note.id)
