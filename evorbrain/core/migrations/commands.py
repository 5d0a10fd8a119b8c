"""Migration commands shared by the HTTP API, the CLI and application start-up."""

from __future__ import annotations

import logging
from typing import Optional

from flask import current_app

from evorbrain.core.errors import ConflictError
from evorbrain.core.migrations.runner import MigrationRunner
from evorbrain.extensions import db

logger = logging.getLogger(__name__)


def get_runner() -> MigrationRunner:
    # The ledger runs on its own connections.
    db.session.remove()
    runner = current_app.extensions.get("migration_runner")
    if runner is None:
        runner = MigrationRunner(db.engine)
        current_app.extensions["migration_runner"] = runner
    return runner


def get_migration_status() -> dict:
    return get_runner().status()


def run_migrations() -> dict:
    runner = get_runner()
    applied = runner.migrate()
    return {"applied": applied, "count": len(applied), "current_version": runner.latest_version()}


def rollback_migrations(target_version: Optional[int] = None, *, atomic: bool = False) -> dict:
    runner = get_runner()
    before = runner.latest_version()
    rolled_back = runner.rollback(target_version, atomic=atomic)
    after = runner.latest_version()
    return {"rolled_back": rolled_back, "from_version": before, "to_version": after}


def reset_database() -> dict:
    """Roll everything back, drop the ledger and migrate again."""
    env = (current_app.config.get("ENV") or "").lower()
    if env == "production":
        raise ConflictError("Database reset is disabled in production")
    runner = get_runner()
    logger.warning("Resetting database schema")
    rolled_back = runner.rollback(0)
    runner.drop_ledger()
    applied = runner.migrate()
    return {"rolled_back": rolled_back, "applied": applied, "current_version": runner.latest_version()}
