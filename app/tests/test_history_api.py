# app/tests/test_history_api.py
"""
Tests for the /history endpoints.

Tests:
- Authentication is required (403 otherwise)
- Get / replace / pin / delete / clear
- Legacy ids are served migrated
- Failures return generic bodies
"""
import json
from unittest.mock import MagicMock, patch

import pytest
from lzstring import LZString

from app.services.accounts import SqlAccountStore
from app.services.auth import create_access_token
from history.note_ids import encode_note_id

NOTE_UUID = "6f1e2d3c-4b5a-4978-8877-665544332211"

SEEDED = json.dumps([
    {"id": "note-a", "text": "A", "time": 100, "tags": ["x"], "pinned": True},
    {"id": "note-b", "text": "B", "time": 200, "tags": []},
])


class TestAuthRequired:
    def test_get_without_token(self, client):
        response = client.get("/history")

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    def test_invalid_token(self, client):
        response = client.get("/history", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 403

    def test_token_for_deleted_user(self, client):
        token = create_access_token({"sub": "ghost"})
        response = client.get("/history", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 403

    def test_mutations_without_token(self, client):
        assert client.post("/history", json={"history": "[]"}).status_code == 403
        assert client.post("/history/note-a", json={"pinned": True}).status_code == 403
        assert client.delete("/history").status_code == 403
        assert client.delete("/history/note-a").status_code == 403


class TestGetHistory:
    def test_empty_history(self, client, make_user):
        _, headers = make_user()

        response = client.get("/history", headers=headers)

        assert response.status_code == 200
        assert response.json()["history"] == []

    def test_returns_entries(self, client, make_user):
        _, headers = make_user(history=SEEDED)

        history = client.get("/history", headers=headers).json()["history"]

        by_id = {e["id"]: e for e in history}
        assert by_id["note-a"] == {"id": "note-a", "text": "A", "time": 100, "tags": ["x"], "pinned": True}
        assert "pinned" not in by_id["note-b"]

    def test_legacy_ids_served_canonical(self, client, make_user):
        legacy_id = LZString().compressToBase64(NOTE_UUID)
        _, headers = make_user(
            history=json.dumps([{"id": legacy_id, "text": "Old", "time": 100, "tags": []}])
        )

        history = client.get("/history", headers=headers).json()["history"]

        assert history == [{"id": encode_note_id(NOTE_UUID), "text": "Old", "time": 100, "tags": []}]

    def test_corrupt_blob_is_internal_error(self, client, make_user):
        _, headers = make_user(history="{corrupt")

        response = client.get("/history", headers=headers)

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "internal_error"
        assert "corrupt" not in body["detail"]

    def test_storage_failure_is_generic(self, client, make_user):
        _, headers = make_user(history=SEEDED)

        with patch(
            "app.services.accounts.SqlAccountStore.find_user",
            side_effect=RuntimeError("disk I/O error"),
        ):
            response = client.get("/history", headers=headers)

        assert response.status_code == 500
        assert "disk" not in response.text


class TestReplaceHistory:
    def test_replace_from_string(self, client, make_user, history_blob):
        user_id, headers = make_user(history=SEEDED)
        payload = json.dumps([{"id": "n", "text": "N", "time": 1, "tags": []}])

        response = client.post("/history", json={"history": payload}, headers=headers)

        assert response.status_code == 200
        assert json.loads(history_blob(user_id)) == [{"id": "n", "text": "N", "time": 1, "tags": []}]

    def test_replace_from_array(self, client, make_user, history_blob):
        user_id, headers = make_user()

        response = client.post(
            "/history",
            json={"history": [{"id": "n", "text": "N", "time": 1, "tags": ["t"], "pinned": False}]},
            headers=headers,
        )

        assert response.status_code == 200
        assert json.loads(history_blob(user_id))[0]["pinned"] is False

    def test_missing_history_field(self, client, make_user):
        _, headers = make_user()

        response = client.post("/history", json={}, headers=headers)

        assert response.status_code == 400

    def test_non_array_rejected_before_storage(self, client, make_user, history_blob):
        user_id, headers = make_user(history=SEEDED)

        response = client.post("/history", json={"history": '{"id": "x"}'}, headers=headers)

        assert response.status_code == 400
        assert response.json()["error"] == "bad_request"
        assert history_blob(user_id) == SEEDED

    def test_invalid_json_rejected(self, client, make_user):
        _, headers = make_user()

        response = client.post("/history", json={"history": "[not json"}, headers=headers)

        assert response.status_code == 400


class TestPinEntry:
    def test_pin(self, client, make_user, history_blob):
        user_id, headers = make_user(history=SEEDED)

        response = client.post("/history/note-b", json={"pinned": True}, headers=headers)

        assert response.status_code == 200
        stored = {e["id"]: e for e in json.loads(history_blob(user_id))}
        assert stored["note-b"]["pinned"] is True

    def test_unpin_with_string_flag(self, client, make_user, history_blob):
        user_id, headers = make_user(history=SEEDED)

        response = client.post("/history/note-a", json={"pinned": "false"}, headers=headers)

        assert response.status_code == 200
        stored = {e["id"]: e for e in json.loads(history_blob(user_id))}
        assert stored["note-a"]["pinned"] is False

    def test_missing_flag(self, client, make_user):
        _, headers = make_user(history=SEEDED)

        response = client.post("/history/note-a", json={}, headers=headers)

        assert response.status_code == 400

    def test_invalid_flag(self, client, make_user):
        _, headers = make_user(history=SEEDED)

        response = client.post("/history/note-a", json={"pinned": "yes"}, headers=headers)

        assert response.status_code == 400

    def test_unknown_entry(self, client, make_user, history_blob):
        user_id, headers = make_user(history=SEEDED)

        response = client.post("/history/missing", json={"pinned": True}, headers=headers)

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"
        assert history_blob(user_id) == SEEDED


class TestDelete:
    def test_delete_entry(self, client, make_user, history_blob):
        user_id, headers = make_user(history=SEEDED)

        response = client.delete("/history/note-a", headers=headers)

        assert response.status_code == 200
        assert [e["id"] for e in json.loads(history_blob(user_id))] == ["note-b"]

    def test_delete_twice(self, client, make_user, history_blob):
        user_id, headers = make_user(history=SEEDED)

        first = client.delete("/history/note-a", headers=headers)
        second = client.delete("/history/note-a", headers=headers)

        assert first.json()["removed"] is True
        assert second.status_code == 200
        assert second.json()["removed"] is False
        assert [e["id"] for e in json.loads(history_blob(user_id))] == ["note-b"]

    def test_clear_all(self, client, make_user, history_blob):
        user_id, headers = make_user(history=SEEDED)

        response = client.delete("/history", headers=headers)

        assert response.status_code == 200
        assert history_blob(user_id) == "[]"


class TestSqlAccountStore:
    def test_failed_update_is_rolled_back_and_logged(self, make_user):
        user_id, _ = make_user()
        db = MagicMock()
        db.commit.side_effect = RuntimeError("database is locked")

        with patch("app.services.accounts.get_session", return_value=db), \
                patch("app.services.accounts._logger") as logger:
            with pytest.raises(RuntimeError):
                SqlAccountStore().update_user_history(user_id, "[]")

        db.rollback.assert_called_once()
        db.close.assert_called_once()
        logger.warning.assert_called_once()

    def test_update_unknown_user_returns_false(self):
        assert SqlAccountStore().update_user_history("nobody", "[]") is False
