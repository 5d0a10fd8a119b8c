"""Migration API controllers."""

from __future__ import annotations

from typing import Optional

from flask import Blueprint, jsonify
from pydantic import BaseModel, Field

from evorbrain.core.migrations import commands
from evorbrain.core.utils.requests import parse_body

migrations_api_bp = Blueprint("migrations_api", __name__)


class RollbackRequest(BaseModel):
    target_version: Optional[int] = Field(default=None, ge=0)
    atomic: bool = False


@migrations_api_bp.get("/status")
def status():
    return jsonify({"ok": True, **commands.get_migration_status()})


@migrations_api_bp.post("/run")
def run():
    return jsonify({"ok": True, **commands.run_migrations()})


@migrations_api_bp.post("/rollback")
def rollback():
    data = parse_body(RollbackRequest)
    return jsonify({"ok": True, **commands.rollback_migrations(data.target_version, atomic=data.atomic)})


@migrations_api_bp.post("/reset")
def reset():
    return jsonify({"ok": True, **commands.reset_database()})
