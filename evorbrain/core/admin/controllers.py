"""Repository maintenance and log endpoints."""

from __future__ import annotations

from typing import Optional

from flask import Blueprint, current_app, jsonify
from pydantic import BaseModel, Field

from evorbrain.core.admin import repository_service
from evorbrain.core.log_store import get_log_store
from evorbrain.core.utils.requests import parse_body, parse_query

repository_api_bp = Blueprint("repository_api", __name__)
logs_api_bp = Blueprint("logs_api", __name__)


class CleanupRequest(BaseModel):
    delete_archived_older_than_days: Optional[int] = Field(default=None, ge=0)
    vacuum_database: bool = False


class ExportRequest(BaseModel):
    include_archived: bool = False


class RecentLogsQuery(BaseModel):
    limit: int = Field(default=100, ge=1, le=1000)
    level: Optional[str] = None


class SetLevelRequest(BaseModel):
    level: str = Field(min_length=1)


@repository_api_bp.get("/health")
def health():
    return jsonify({"ok": True, **repository_service.check_health()})


@repository_api_bp.get("/stats")
def stats():
    return jsonify({"ok": True, "stats": repository_service.database_stats()})


@repository_api_bp.post("/cleanup")
def cleanup():
    data = parse_body(CleanupRequest)
    result = repository_service.cleanup(
        older_than_days=data.delete_archived_older_than_days,
        vacuum_database=data.vacuum_database,
    )
    return jsonify({"ok": True, **result})


@repository_api_bp.post("/export")
def export():
    data = parse_body(ExportRequest)
    return jsonify({"ok": True, **repository_service.export_data(include_archived=data.include_archived)})


@logs_api_bp.get("")
def recent_logs():
    params = parse_query(RecentLogsQuery)
    store = get_log_store(current_app)
    entries = store.recent(limit=params.limit, min_level=params.level)
    return jsonify({"ok": True, "items": entries, "level": store.level})


@logs_api_bp.put("/level")
def set_level():
    data = parse_body(SetLevelRequest)
    level = get_log_store(current_app).set_level(data.level)
    return jsonify({"ok": True, "level": level})
