"""Cascading archive, restore and guarded hard delete over the hierarchy."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, Iterator, List, Set

from sqlalchemy import Table, delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError

from evorbrain.core.errors import ConflictError, DatabaseError, EvorBrainError, NotFoundError
from evorbrain.core.hierarchy.graph import ARCHIVE_ORDER, ENTITY_LABELS, blocking_edges, child_edges
from evorbrain.core.utils.dates import isoformat, utcnow
from evorbrain.domains.goals.models.goal_models import Goal
from evorbrain.domains.life_areas.models.life_area_models import LifeArea
from evorbrain.domains.notes.models.note_models import Note
from evorbrain.domains.projects.models.project_models import Project, Task
from evorbrain.extensions import db

logger = logging.getLogger(__name__)

TABLES: Dict[str, Table] = {
    "life_areas": LifeArea.__table__,
    "goals": Goal.__table__,
    "projects": Project.__table__,
    "tasks": Task.__table__,
    "notes": Note.__table__,
}

# Keeps IN (...) lists well under SQLite's bound-parameter limit.
_CHUNK = 500


@dataclass
class CascadeSummary:
    root_table: str
    root_id: str
    timestamp: datetime | None
    counts: Dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def to_dict(self) -> dict:
        return {
            "root_table": self.root_table,
            "root_id": self.root_id,
            "timestamp": isoformat(self.timestamp),
            "counts": dict(self.counts),
            "total": self.total,
        }


def _chunks(ids: List[str]) -> Iterator[List[str]]:
    for start in range(0, len(ids), _CHUNK):
        yield ids[start : start + _CHUNK]


@contextmanager
def _transaction(action: str) -> Iterator[None]:
    session = db.session
    try:
        yield
        session.commit()
    except EvorBrainError:
        session.rollback()
        raise
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("%s failed: %s", action, exc)
        raise DatabaseError(f"{action} failed: {exc}") from exc
    session.expire_all()


def _require_root(table_name: str, row_id: str):
    table = TABLES[table_name]
    row = db.session.execute(
        select(table.c.id, table.c.archived_at).where(table.c.id == row_id)
    ).first()
    if row is None:
        raise NotFoundError(ENTITY_LABELS[table_name], row_id)
    return row


def collect_descendants(table_name: str, root_id: str) -> Dict[str, Set[str]]:
    """Every transitive dependent of a root, archived or not, keyed by table.

    Self-referencing edges (subtasks) terminate because each table keeps the
    set of ids already visited.
    """
    found: Dict[str, Set[str]] = {name: set() for name in ARCHIVE_ORDER}
    frontier: Dict[str, Set[str]] = {table_name: {root_id}}
    visited: Dict[str, Set[str]] = {table_name: {root_id}}
    while frontier:
        next_frontier: Dict[str, Set[str]] = {}
        for parent_table, parent_ids in frontier.items():
            for edge in child_edges(parent_table):
                child = TABLES[edge.child]
                fk = child.c[edge.foreign_key]
                seen = visited.setdefault(edge.child, set())
                for chunk in _chunks(sorted(parent_ids)):
                    rows = db.session.execute(select(child.c.id).where(fk.in_(chunk))).scalars()
                    new_ids = set(rows) - seen
                    if not new_ids:
                        continue
                    seen.update(new_ids)
                    found[edge.child].update(new_ids)
                    next_frontier.setdefault(edge.child, set()).update(new_ids)
        frontier = next_frontier
    return found


def _archive_rows(table_name: str, ids: Iterable[str], timestamp: datetime) -> int:
    table = TABLES[table_name]
    count = 0
    for chunk in _chunks(sorted(ids)):
        result = db.session.execute(
            update(table)
            .where(table.c.id.in_(chunk), table.c.archived_at.is_(None))
            .values(archived_at=timestamp, updated_at=timestamp)
        )
        count += result.rowcount or 0
    return count


def archive_cascade(table_name: str, root_id: str) -> CascadeSummary:
    """Archive a root row and every unarchived dependent with one timestamp.

    Rows already archived keep their original timestamp, but the walk still
    passes through them so unarchived rows beneath are caught.
    """
    if table_name not in TABLES:
        raise ValueError(f"Unknown hierarchy table: {table_name}")
    label = ENTITY_LABELS[table_name]
    with _transaction(f"Archive {label.lower()}"):
        _require_root(table_name, root_id)
        timestamp = utcnow()
        targets = collect_descendants(table_name, root_id)
        targets[table_name].add(root_id)
        summary = CascadeSummary(table_name, root_id, timestamp)
        for name in ARCHIVE_ORDER:
            if targets[name]:
                summary.counts[name] = _archive_rows(name, targets[name], timestamp)
    logger.info("Archived %s %s: %s", label.lower(), root_id, summary.counts)
    return summary


def archive_life_area_cascade(life_area_id: str) -> CascadeSummary:
    return archive_cascade("life_areas", life_area_id)


def archive_goal_cascade(goal_id: str) -> CascadeSummary:
    return archive_cascade("goals", goal_id)


def archive_project_cascade(project_id: str) -> CascadeSummary:
    return archive_cascade("projects", project_id)


def archive_task_cascade(task_id: str) -> CascadeSummary:
    return archive_cascade("tasks", task_id)


def archive_note(note_id: str) -> CascadeSummary:
    return archive_cascade("notes", note_id)


def restore(table_name: str, row_id: str, *, cascade: bool = False) -> CascadeSummary:
    """Clear ``archived_at`` on one row.

    With ``cascade`` set, descendants archived at exactly the root's timestamp
    (that is, by the same cascade) are restored too.
    """
    label = ENTITY_LABELS[table_name]
    with _transaction(f"Restore {label.lower()}"):
        root = _require_root(table_name, row_id)
        archived_at = root.archived_at
        now = utcnow()
        summary = CascadeSummary(table_name, row_id, now)
        if archived_at is None:
            return summary
        targets: Dict[str, Set[str]] = {name: set() for name in ARCHIVE_ORDER}
        if cascade:
            targets = collect_descendants(table_name, row_id)
        targets[table_name].add(row_id)
        for name in ARCHIVE_ORDER:
            if not targets[name]:
                continue
            table = TABLES[name]
            count = 0
            for chunk in _chunks(sorted(targets[name])):
                result = db.session.execute(
                    update(table)
                    .where(table.c.id.in_(chunk), table.c.archived_at == archived_at)
                    .values(archived_at=None, updated_at=now)
                )
                count += result.rowcount or 0
            summary.counts[name] = count
    logger.info("Restored %s %s: %s", label.lower(), row_id, summary.counts)
    return summary


def count_blocking_children(table_name: str, row_id: str) -> int:
    total = 0
    for edge in blocking_edges(table_name):
        child = TABLES[edge.child]
        total += db.session.execute(
            select(func.count()).select_from(child).where(child.c[edge.foreign_key] == row_id)
        ).scalar_one()
    return total


def hard_delete(table_name: str, row_id: str) -> None:
    """Physically delete a row that has no direct hierarchy children.

    Attached notes are removed by the database through ``ON DELETE CASCADE``.
    """
    label = ENTITY_LABELS[table_name]
    with _transaction(f"Delete {label.lower()}"):
        _require_root(table_name, row_id)
        blocking = count_blocking_children(table_name, row_id)
        if blocking:
            raise ConflictError(
                f"Cannot delete {label.lower()}: {blocking} dependent record(s) exist",
                blocking_count=blocking,
            )
        table = TABLES[table_name]
        db.session.execute(delete(table).where(table.c.id == row_id))
    logger.info("Deleted %s %s", label.lower(), row_id)


__all__ = [
    "CascadeSummary",
    "archive_cascade",
    "archive_life_area_cascade",
    "archive_goal_cascade",
    "archive_project_cascade",
    "archive_task_cascade",
    "archive_note",
    "restore",
    "hard_delete",
    "collect_descendants",
    "count_blocking_children",
]
