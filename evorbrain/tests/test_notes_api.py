"""Tests for the notes API endpoints."""

import uuid

import pytest

pytestmark = pytest.mark.integration

from evorbrain.domains.notes.services.note_service import create_note, search_notes


class TestNotesAPI:
    def test_create_note_on_goal(self, client, hierarchy):
        goal_id = hierarchy["goal"].id
        resp = client.post("/api/notes", json={"goal_id": goal_id, "title": "Shoes", "content": "Try on Saturday"})
        assert resp.status_code == 201
        note = resp.get_json()["note"]
        assert note["goal_id"] == goal_id
        assert note["life_area_id"] is None
        assert note["task_id"] is None

    @pytest.mark.parametrize("parents", [(), ("goal", "project")])
    def test_exactly_one_parent(self, client, hierarchy, parents):
        body = {"title": "Ambiguous"}
        for key in parents:
            body[f"{key}_id"] = hierarchy[key].id
        resp = client.post("/api/notes", json=body)
        assert resp.status_code == 400
        assert "exactly one" in resp.get_json()["message"]

    def test_missing_parent(self, client):
        resp = client.post("/api/notes", json={"task_id": str(uuid.uuid4()), "title": "Lost"})
        assert resp.status_code == 404

    def test_list_by_parent(self, client, hierarchy):
        items = client.get(f"/api/notes?project_id={hierarchy['project'].id}").get_json()["items"]
        assert [n["title"] for n in items] == ["Plan"]
        assert client.get("/api/notes").get_json()["total"] == 5

    def test_filter_by_two_parents_rejected(self, client, hierarchy):
        resp = client.get(
            f"/api/notes?goal_id={hierarchy['goal'].id}&project_id={hierarchy['project'].id}"
        )
        assert resp.status_code == 400

    def test_update(self, client, hierarchy):
        note_id = hierarchy["notes"]["task"].id
        resp = client.patch(f"/api/notes/{note_id}", json={"content": "Uptown instead"})
        assert resp.status_code == 200
        note = resp.get_json()["note"]
        assert note["content"] == "Uptown instead"
        assert note["title"] == "Shops"

    def test_archive_restore_delete(self, client, hierarchy):
        note_id = hierarchy["notes"]["goal"].id
        summary = client.post(f"/api/notes/{note_id}/archive").get_json()["archive"]
        assert summary["counts"] == {"notes": 1}
        assert client.get("/api/notes").get_json()["total"] == 4

        restored = client.post(f"/api/notes/{note_id}/restore").get_json()["note"]
        assert restored["archived_at"] is None

        assert client.delete(f"/api/notes/{note_id}").status_code == 200
        assert client.get(f"/api/notes/{note_id}").status_code == 404


class TestNoteSearch:
    """Case-insensitive substring search over title and content."""

    def test_matches_title_and_content(self, client, hierarchy):
        items = client.get("/api/notes/search", query_string={"q": "eu 4"}).get_json()["items"]
        assert [n["title"] for n in items] == ["Sizes"]

        items = client.get("/api/notes/search?q=RACE").get_json()["items"]
        assert [n["title"] for n in items] == ["Race list"]

    def test_wildcards_are_literal(self, app, hierarchy):
        area_id = hierarchy["life_area"].id
        create_note(life_area_id=area_id, title="Discount", content="50% off")
        create_note(life_area_id=area_id, title="Plain", content="500 off")

        assert [n.title for n in search_notes("0%")] == ["Discount"]
        assert search_notes("_") == []

    def test_archived_notes_excluded(self, client, hierarchy):
        client.post(f"/api/life-areas/{hierarchy['life_area'].id}/archive")
        assert client.get("/api/notes/search?q=e").get_json()["total"] == 0

    def test_limit(self, app, client, hierarchy):
        area_id = hierarchy["life_area"].id
        for i in range(55):
            create_note(life_area_id=area_id, title=f"Log {i}", content="daily log")

        assert client.get("/api/notes/search?q=daily").get_json()["total"] == 50
        assert client.get("/api/notes/search?q=daily&limit=5").get_json()["total"] == 5
        assert client.get("/api/notes/search?q=daily&limit=51").status_code == 400

    def test_blank_term_rejected(self, client):
        assert client.get("/api/notes/search?q=").status_code == 400
        assert client.get("/api/notes/search").status_code == 400
