"""Tests for the per-application log store and the logs endpoints."""

import json
import logging

import pytest

from evorbrain.core.errors import ValidationError
from evorbrain.core.log_store import LogStore, get_log_store


@pytest.fixture
def bare_logger():
    logger = logging.getLogger("evorbrain_test_log_store")
    logger.propagate = False
    logger.setLevel(logging.DEBUG)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.mark.unit
class TestLogStore:
    def test_buffer_is_bounded(self, bare_logger):
        store = LogStore(bare_logger, capacity=3)
        store.attach()
        for i in range(5):
            bare_logger.info("event %d", i)
        assert [e["message"] for e in store.recent()] == ["event 2", "event 3", "event 4"]

    def test_entry_shape(self, bare_logger):
        store = LogStore(bare_logger, capacity=10)
        store.attach()
        bare_logger.warning("disk low", extra={"context": {"free_mb": 12}})
        entry = store.recent()[0]
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "evorbrain_test_log_store"
        assert entry["context"] == {"free_mb": 12}
        assert "timestamp" in entry
        assert "error_details" not in entry

    def test_exception_details(self, bare_logger):
        store = LogStore(bare_logger, capacity=10)
        store.attach()
        try:
            raise ValueError("boom")
        except ValueError:
            bare_logger.exception("failed")
        assert store.recent()[0]["error_details"] == "ValueError: boom"

    def test_min_level_and_limit(self, bare_logger):
        store = LogStore(bare_logger, capacity=10)
        store.attach()
        bare_logger.debug("d")
        bare_logger.info("i")
        bare_logger.error("e1")
        bare_logger.critical("c")
        bare_logger.error("e2")
        assert [e["message"] for e in store.recent(min_level="error")] == ["e1", "c", "e2"]
        assert [e["message"] for e in store.recent(limit=2)] == ["c", "e2"]
        with pytest.raises(ValidationError):
            store.recent(min_level="loud")

    def test_set_level(self, bare_logger):
        store = LogStore(bare_logger, capacity=10)
        store.attach()
        assert store.set_level("warning") == "WARNING"
        bare_logger.info("hidden")
        assert store.level == "WARNING"
        assert all(e["message"] != "hidden" for e in store.recent())
        with pytest.raises(ValidationError):
            store.set_level("verbose")

    def test_json_lines_file(self, bare_logger, tmp_path):
        store = LogStore(bare_logger, capacity=10, log_dir=tmp_path / "logs")
        store.attach()
        bare_logger.info("written")
        store.detach()
        assert store.log_file.name.startswith("evorbrain_")
        lines = store.log_file.read_text(encoding="utf-8").splitlines()
        assert json.loads(lines[-1])["message"] == "written"

    def test_reattach_replaces_previous_store(self, bare_logger):
        first = LogStore(bare_logger, capacity=10)
        first.attach()
        second = LogStore(bare_logger, capacity=10)
        second.attach()
        bare_logger.info("only second")
        assert first.recent() == []
        assert [e["message"] for e in second.recent()] == ["only second"]


@pytest.mark.integration
class TestLogsAPI:
    def test_service_logs_are_captured(self, client):
        client.post("/api/life-areas", json={"name": "Health"})
        data = client.get("/api/logs").get_json()
        assert data["level"] == "INFO"
        assert any(e["message"].startswith("Created life area") for e in data["items"])

    def test_filter_by_level(self, app, client):
        app.logger.warning("watch out")
        items = client.get("/api/logs?level=WARNING").get_json()["items"]
        assert [e["message"] for e in items] == ["watch out"]

    def test_change_level(self, app, client):
        resp = client.put("/api/logs/level", json={"level": "error"})
        assert resp.status_code == 200
        assert resp.get_json()["level"] == "ERROR"
        assert get_log_store(app).level == "ERROR"

    def test_unknown_level(self, client):
        resp = client.put("/api/logs/level", json={"level": "chatty"})
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "validation_error"
