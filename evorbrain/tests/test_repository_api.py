"""Tests for repository maintenance endpoints: health, stats, cleanup, export."""

from datetime import timedelta

import pytest
from sqlalchemy import update

pytestmark = pytest.mark.integration

from evorbrain.core.hierarchy import archive_service
from evorbrain.core.hierarchy.archive_service import TABLES
from evorbrain.core.utils.dates import utcnow
from evorbrain.domains.tags.services.tag_service import create_tag, tag_task
from evorbrain.extensions import db


def _backdate_archived(days):
    """Move every archived row's archived_at ``days`` into the past."""
    stamp = utcnow() - timedelta(days=days)
    for table in TABLES.values():
        db.session.execute(
            update(table).where(table.c.archived_at.is_not(None)).values(archived_at=stamp)
        )
    db.session.commit()


class TestHealthAndStats:
    def test_health(self, client):
        resp = client.get("/api/repository/health")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["ok"] is True
        assert data["healthy"] is True

    def test_app_health_route(self, client):
        assert client.get("/health").get_json() == {"ok": True}

    def test_stats_count_unarchived_rows(self, client, hierarchy):
        create_tag(name="home")
        stats = client.get("/api/repository/stats").get_json()["stats"]
        assert stats == {
            "life_areas_count": 1,
            "goals_count": 1,
            "projects_count": 1,
            "tasks_count": 2,
            "notes_count": 5,
            "tags_count": 1,
            "archived_items_count": 0,
        }

    def test_stats_after_archive(self, client, hierarchy):
        archive_service.archive_task_cascade(hierarchy["task"].id)
        stats = client.get("/api/repository/stats").get_json()["stats"]
        assert stats["tasks_count"] == 0
        assert stats["notes_count"] == 3
        assert stats["archived_items_count"] == 4


class TestCleanup:
    def test_nothing_requested(self, client):
        data = client.post("/api/repository/cleanup", json={}).get_json()
        assert data["affected_rows"] == 0
        assert data["message"] == "No cleanup operations performed"

    def test_deletes_only_old_archived_rows(self, client, hierarchy):
        archive_service.archive_goal_cascade(hierarchy["goal"].id)
        _backdate_archived(40)
        recent_note_id = hierarchy["notes"]["life_area"].id
        archive_service.archive_note(recent_note_id)

        resp = client.post("/api/repository/cleanup", json={"delete_archived_older_than_days": 30})
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["deleted"]["goals"] == 1
        assert data["deleted"]["projects"] == 1
        assert data["deleted"]["notes"] == 4
        assert data["affected_rows"] >= 7

        stats = client.get("/api/repository/stats").get_json()["stats"]
        assert stats["life_areas_count"] == 1
        assert stats["goals_count"] == 0
        assert stats["tasks_count"] == 0
        assert stats["archived_items_count"] == 1

    def test_negative_days_rejected(self, client):
        resp = client.post("/api/repository/cleanup", json={"delete_archived_older_than_days": -1})
        assert resp.status_code == 400

    def test_vacuum(self, client, hierarchy):
        resp = client.post("/api/repository/cleanup", json={"vacuum_database": True})
        assert resp.status_code == 200
        assert "Database vacuumed successfully" in resp.get_json()["message"]
        # Still usable afterwards.
        assert client.get("/api/life-areas").get_json()["total"] == 1


class TestExport:
    def test_export_unarchived(self, client, hierarchy):
        tag = create_tag(name="gear")
        tag_task(hierarchy["task"].id, tag.id)
        archive_service.archive_note(hierarchy["notes"]["goal"].id)

        resp = client.post("/api/repository/export", json={})
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["item_count"] == 9
        assert len(data["data"]["notes"]) == 4
        assert data["data"]["tags"][0]["name"] == "gear"
        assert data["data"]["task_tags"] == [{"task_id": hierarchy["task"].id, "tag_id": tag.id}]
        assert data["data"]["project_tags"] == []
        assert data["export_date"]

    def test_export_with_archived(self, client, hierarchy):
        archive_service.archive_note(hierarchy["notes"]["goal"].id)
        data = client.post("/api/repository/export", json={"include_archived": True}).get_json()
        assert data["item_count"] == 10
        archived = [n for n in data["data"]["notes"] if n["archived_at"] is not None]
        assert len(archived) == 1
