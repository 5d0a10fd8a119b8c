"""Tests for the life areas API endpoints."""

import uuid

import pytest

pytestmark = pytest.mark.integration

from evorbrain.domains.goals.services.goal_service import create_goal
from evorbrain.domains.life_areas.services.life_area_service import create_life_area


def _create(client, **body):
    resp = client.post("/api/life-areas", json=body)
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["life_area"]


class TestLifeAreasAPI:
    """CRUD and ordering."""

    def test_list_empty(self, client):
        resp = client.get("/api/life-areas")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["ok"] is True
        assert data["items"] == []
        assert data["total"] == 0

    def test_create_trims_and_assigns_sort_order(self, client):
        first = _create(client, name="  Health  ", color="#2a4")
        second = _create(client, name="Career")
        assert first["name"] == "Health"
        assert first["color"] == "#2a4"
        assert first["archived_at"] is None
        assert (first["sort_order"], second["sort_order"]) == (0, 1)

    def test_list_ordered_by_sort_order(self, client):
        for name in ("Health", "Career", "Family"):
            _create(client, name=name)
        names = [a["name"] for a in client.get("/api/life-areas").get_json()["items"]]
        assert names == ["Health", "Career", "Family"]

    def test_get_and_update(self, client):
        area = _create(client, name="Health")
        resp = client.patch(f"/api/life-areas/{area['id']}", json={"description": "Body and mind"})
        assert resp.status_code == 200
        assert resp.get_json()["life_area"]["description"] == "Body and mind"

        fetched = client.get(f"/api/life-areas/{area['id']}").get_json()["life_area"]
        assert fetched["name"] == "Health"
        assert fetched["description"] == "Body and mind"

    def test_reorder(self, client):
        ids = [_create(client, name=name)["id"] for name in ("A", "B", "C")]
        resp = client.post("/api/life-areas/reorder", json={"ids": list(reversed(ids))})
        assert resp.status_code == 200
        assert [a["sort_order"] for a in resp.get_json()["items"]] == [0, 1, 2]

        names = [a["name"] for a in client.get("/api/life-areas").get_json()["items"]]
        assert names == ["C", "B", "A"]

    def test_reorder_unknown_id(self, client):
        _create(client, name="A")
        resp = client.post("/api/life-areas/reorder", json={"ids": [str(uuid.uuid4())]})
        assert resp.status_code == 404


class TestLifeAreasValidation:
    """Input rejected before anything is written."""

    @pytest.mark.parametrize(
        "body",
        [{}, {"name": "   "}, {"name": "x" * 101}, {"name": "Health", "color": "red"}],
    )
    def test_invalid_create(self, client, body):
        resp = client.post("/api/life-areas", json=body)
        assert resp.status_code == 400
        data = resp.get_json()
        assert data["ok"] is False
        assert data["error"] == "validation_error"
        assert client.get("/api/life-areas").get_json()["total"] == 0

    def test_missing_life_area(self, client):
        resp = client.get(f"/api/life-areas/{uuid.uuid4()}")
        assert resp.status_code == 404
        assert resp.get_json()["error"] == "not_found"

    def test_malformed_id(self, client):
        resp = client.get("/api/life-areas/not-a-uuid")
        assert resp.status_code == 400
        assert resp.get_json()["message"] == "Invalid life area ID format"


class TestLifeAreasLifecycle:
    """Archive, restore and hard delete through the API."""

    def test_archive_hides_from_default_list(self, client, hierarchy):
        area_id = hierarchy["life_area"].id
        resp = client.post(f"/api/life-areas/{area_id}/archive")
        assert resp.status_code == 200
        summary = resp.get_json()["archive"]
        assert summary["counts"]["life_areas"] == 1
        assert summary["counts"]["goals"] == 1
        assert summary["total"] == 10

        assert client.get("/api/life-areas").get_json()["total"] == 0
        listed = client.get("/api/life-areas?include_archived=true").get_json()["items"]
        assert listed[0]["archived_at"] == summary["timestamp"]

    def test_restore_without_cascade(self, client, hierarchy):
        area_id = hierarchy["life_area"].id
        client.post(f"/api/life-areas/{area_id}/archive")

        resp = client.post(f"/api/life-areas/{area_id}/restore")
        assert resp.status_code == 200
        assert resp.get_json()["life_area"]["archived_at"] is None
        assert client.get("/api/goals").get_json()["total"] == 0

    def test_restore_with_cascade(self, client, hierarchy):
        area_id = hierarchy["life_area"].id
        client.post(f"/api/life-areas/{area_id}/archive")

        resp = client.post(f"/api/life-areas/{area_id}/restore", json={"cascade": True})
        assert resp.status_code == 200
        assert client.get("/api/goals").get_json()["total"] == 1
        assert client.get("/api/tasks").get_json()["total"] == 2

    def test_delete_blocked_by_goal(self, client, hierarchy):
        resp = client.delete(f"/api/life-areas/{hierarchy['life_area'].id}")
        assert resp.status_code == 409
        data = resp.get_json()
        assert data["error"] == "conflict"
        assert data["blocking_count"] == 1

    def test_delete_empty_life_area(self, app, client):
        area = create_life_area(name="Empty")
        area_id = area.id
        assert client.delete(f"/api/life-areas/{area_id}").status_code == 200
        assert client.get(f"/api/life-areas/{area_id}").status_code == 404

    def test_delete_after_goal_removed(self, app, client):
        area_id = create_life_area(name="Learning").id
        goal_id = create_goal(life_area_id=area_id, title="Read more").id
        assert client.delete(f"/api/goals/{goal_id}").status_code == 200
        assert client.delete(f"/api/life-areas/{area_id}").status_code == 200
