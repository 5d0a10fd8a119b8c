"""Repository maintenance: health, statistics, cleanup and export."""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional

from sqlalchemy import delete, func, select, text
from sqlalchemy.exc import SQLAlchemyError

from evorbrain.core.database.connection import vacuum
from evorbrain.core.errors import DatabaseError
from evorbrain.core.hierarchy.archive_service import TABLES
from evorbrain.core.hierarchy.graph import ARCHIVE_ORDER
from evorbrain.core.utils.dates import utcnow
from evorbrain.domains.tags.models.tag_models import Tag, project_tags, task_tags
from evorbrain.extensions import db

logger = logging.getLogger(__name__)


def check_health() -> dict:
    """Begin and commit a transaction to prove the database is usable."""
    try:
        with db.engine.begin() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.error("Repository health check failed: %s", exc)
        raise DatabaseError(f"Health check failed: {exc}") from exc
    return {"healthy": True, "message": "Repository is healthy"}


def database_stats() -> dict:
    stats: Dict[str, int] = {}
    archived = 0
    for name in ARCHIVE_ORDER:
        table = TABLES[name]
        stats[f"{name}_count"] = db.session.execute(
            select(func.count()).select_from(table).where(table.c.archived_at.is_(None))
        ).scalar_one()
        archived += db.session.execute(
            select(func.count()).select_from(table).where(table.c.archived_at.is_not(None))
        ).scalar_one()
    stats["tags_count"] = db.session.execute(select(func.count(Tag.id))).scalar_one()
    stats["archived_items_count"] = archived
    return stats


def cleanup(*, older_than_days: Optional[int] = None, vacuum_database: bool = False) -> dict:
    """Hard-delete rows archived before the cutoff, then optionally VACUUM.

    Leaves go first; rows still referenced by a newer archived or unarchived
    child are removed with their parent through ``ON DELETE CASCADE``.
    """
    deleted: Dict[str, int] = {}
    messages = []
    if older_than_days is not None:
        cutoff = utcnow() - timedelta(days=older_than_days)
        try:
            for name in reversed(ARCHIVE_ORDER):
                table = TABLES[name]
                result = db.session.execute(
                    delete(table).where(table.c.archived_at.is_not(None), table.c.archived_at < cutoff)
                )
                count = result.rowcount or 0
                if count:
                    deleted[name] = count
                    messages.append(f"Deleted {count} archived {name.replace('_', ' ')}")
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise DatabaseError(f"Cleanup failed: {exc}") from exc
        db.session.expire_all()
    if vacuum_database:
        db.session.remove()
        try:
            vacuum(db.engine)
        except SQLAlchemyError as exc:
            raise DatabaseError(f"Vacuum failed: {exc}") from exc
        messages.append("Database vacuumed successfully")
    total = sum(deleted.values())
    logger.info("Cleanup finished: %s", messages or "nothing to do")
    return {
        "deleted": deleted,
        "affected_rows": total,
        "message": ", ".join(messages) if messages else "No cleanup operations performed",
    }


def _jsonable(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def export_data(*, include_archived: bool = False) -> dict:
    """Every hierarchy table plus tags as JSON-ready rows."""
    data: Dict[str, list] = {}
    total = 0
    for name in ARCHIVE_ORDER:
        table = TABLES[name]
        query = select(table).order_by(table.c.created_at)
        if not include_archived:
            query = query.where(table.c.archived_at.is_(None))
        rows = [
            {key: _jsonable(value) for key, value in row.items()}
            for row in db.session.execute(query).mappings()
        ]
        data[name] = rows
        total += len(rows)
    for table in (Tag.__table__, task_tags, project_tags):
        rows = [
            {key: _jsonable(value) for key, value in row.items()}
            for row in db.session.execute(select(table)).mappings()
        ]
        data[table.name] = rows
    return {"data": data, "item_count": total, "export_date": utcnow().isoformat()}
