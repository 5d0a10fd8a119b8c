"""Tests for the migration commands over HTTP and the Flask CLI."""

import pytest
from sqlalchemy import inspect

pytestmark = pytest.mark.integration

from evorbrain.extensions import db


def _tables():
    return set(inspect(db.engine).get_table_names())


class TestMigrationsAPI:
    def test_status_after_startup(self, client):
        resp = client.get("/api/migrations/status")
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["current_version"] == 2
        assert data["latest_available"] == 2
        assert data["pending"] == []
        assert data["drifted"] == []
        assert [m["applied"] for m in data["migrations"]] == [True, True]

    def test_run_is_idempotent(self, client):
        data = client.post("/api/migrations/run").get_json()
        assert data["applied"] == []
        assert data["count"] == 0
        assert data["current_version"] == 2

    def test_rollback_then_run(self, client):
        data = client.post("/api/migrations/rollback", json={"target_version": 1}).get_json()
        assert data["rolled_back"] == [2]
        assert (data["from_version"], data["to_version"]) == (2, 1)
        assert "tags" not in _tables()

        assert client.get("/api/migrations/status").get_json()["pending"] == [2]

        data = client.post("/api/migrations/run").get_json()
        assert data["applied"] == [2]
        assert "tags" in _tables()

    def test_atomic_rollback_to_zero(self, client):
        data = client.post("/api/migrations/rollback", json={"target_version": 0, "atomic": True}).get_json()
        assert data["rolled_back"] == [2, 1]
        assert data["to_version"] is None
        assert "life_areas" not in _tables()

    def test_negative_target_rejected(self, client):
        resp = client.post("/api/migrations/rollback", json={"target_version": -1})
        assert resp.status_code == 400

    def test_reset_rebuilds_schema(self, client, hierarchy):
        data = client.post("/api/migrations/reset").get_json()
        assert data["rolled_back"] == [2, 1]
        assert data["applied"] == [1, 2]
        assert data["current_version"] == 2
        assert client.get("/api/life-areas").get_json()["total"] == 0

    def test_reset_refused_in_production(self, app, client):
        app.config["ENV"] = "production"
        resp = client.post("/api/migrations/reset")
        assert resp.status_code == 409
        assert "life_areas" in _tables()


class TestMigrationsCLI:
    def test_db_status(self, app):
        result = app.test_cli_runner().invoke(args=["db-status"])
        assert result.exit_code == 0
        assert "Current version: 2" in result.output
        assert "001 Initial schema: life areas, goals, projects, tasks and notes: applied" in result.output
        assert "002 add tags: applied" in result.output

    def test_db_rollback_and_migrate(self, app):
        runner = app.test_cli_runner()
        result = runner.invoke(args=["db-rollback", "--target", "1"])
        assert result.exit_code == 0
        assert "now at version 1" in result.output

        result = runner.invoke(args=["db-migrate"])
        assert result.exit_code == 0
        assert "Applied 1 migration(s); now at version 2" in result.output
