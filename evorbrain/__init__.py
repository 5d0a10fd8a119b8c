"""EvorBrain application factory and bootstrap."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping, Optional

from flask import Flask

from evorbrain.config import config_by_name
from evorbrain.core.errors import register_error_handlers
from evorbrain.core.log_store import init_logging
from evorbrain.extensions import db, init_extensions


def create_app(config_name: Optional[str] = None, overrides: Optional[Mapping[str, Any]] = None) -> Flask:
    """Create and configure the EvorBrain Flask application."""
    from evorbrain.core.database.connection import database_uri

    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()
    project_root = Path(__file__).resolve().parent.parent
    instance_root = project_root / "instance"

    app = Flask(__name__, instance_path=str(instance_root), instance_relative_config=True)
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)
    if overrides:
        app.config.update(overrides)

    # Data directory holds the database file and logs; default is the instance folder
    data_dir = Path(app.config.get("DATA_DIR") or instance_root).expanduser().resolve()
    data_dir.mkdir(parents=True, exist_ok=True)
    app.config["DATA_DIR"] = str(data_dir)

    init_logging(app)

    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        app.config["SQLALCHEMY_DATABASE_URI"] = database_uri(data_dir, app.config["DATABASE_FILENAME"])
    engine_opts = app.config.setdefault("SQLALCHEMY_ENGINE_OPTIONS", {})
    connect_args = engine_opts.setdefault("connect_args", {})
    connect_args.setdefault("timeout", app.config["DB_BUSY_TIMEOUT_SECONDS"])

    init_extensions(app)
    _register_blueprints(app)
    register_error_handlers(app)

    @app.get("/health")
    def health():
        return {"ok": True}, 200

    from evorbrain.core.migrations.cli import register_commands

    register_commands(app)

    if app.config.get("AUTO_MIGRATE", True):
        _bring_schema_up_to_date(app)

    app.logger.info("EvorBrain started (env=%s, data_dir=%s)", env_name, data_dir)
    return app


def _bring_schema_up_to_date(app: Flask) -> None:
    """Apply pending migrations; any failure aborts start-up."""
    from evorbrain.core.database.connection import check_connection
    from evorbrain.core.migrations.runner import MigrationRunner

    with app.app_context():
        try:
            check_connection(db.engine)
            runner = MigrationRunner(db.engine)
            app.extensions["migration_runner"] = runner
            runner.migrate()
        except Exception:
            app.logger.exception("Database initialisation failed")
            raise


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from evorbrain.core.admin.controllers import logs_api_bp, repository_api_bp
    from evorbrain.core.migrations.controllers import migrations_api_bp
    from evorbrain.domains.goals.controllers.goal_api import goal_api_bp
    from evorbrain.domains.life_areas.controllers.life_area_api import life_area_api_bp
    from evorbrain.domains.notes.controllers.note_api import note_api_bp
    from evorbrain.domains.projects.controllers.project_api import project_api_bp
    from evorbrain.domains.projects.controllers.task_api import task_api_bp
    from evorbrain.domains.tags.controllers.tag_api import tag_api_bp

    app.register_blueprint(life_area_api_bp, url_prefix="/api/life-areas")
    app.register_blueprint(goal_api_bp, url_prefix="/api/goals")
    app.register_blueprint(project_api_bp, url_prefix="/api/projects")
    app.register_blueprint(task_api_bp, url_prefix="/api/tasks")
    app.register_blueprint(note_api_bp, url_prefix="/api/notes")
    app.register_blueprint(tag_api_bp, url_prefix="/api/tags")
    app.register_blueprint(repository_api_bp, url_prefix="/api/repository")
    app.register_blueprint(migrations_api_bp, url_prefix="/api/migrations")
    app.register_blueprint(logs_api_bp, url_prefix="/api/logs")
