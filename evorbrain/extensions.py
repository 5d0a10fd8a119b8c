"""Shared extensions for the EvorBrain application."""

from flask_sqlalchemy import SQLAlchemy

# Core persistence
db = SQLAlchemy(session_options={"expire_on_commit": False})


def init_extensions(app) -> None:
    """Initialize all extensions with the Flask app."""
    from evorbrain.core.database.connection import configure_sqlite_engine

    db.init_app(app)
    with app.app_context():
        configure_sqlite_engine(
            db.engine, busy_timeout_ms=int(app.config["DB_BUSY_TIMEOUT_SECONDS"]) * 1000
        )
