"""Note service layer."""

from __future__ import annotations

import logging
from typing import List

from sqlalchemy import or_, select

from evorbrain.core.errors import ValidationError
from evorbrain.core.hierarchy import archive_service
from evorbrain.core.utils.queries import get_or_raise
from evorbrain.core.utils.validation import require_uuid
from evorbrain.domains.goals.models.goal_models import Goal
from evorbrain.domains.life_areas.models.life_area_models import LifeArea
from evorbrain.domains.notes.models.note_models import NOTE_PARENT_FIELDS, Note
from evorbrain.domains.projects.models.project_models import Project, Task
from evorbrain.extensions import db

logger = logging.getLogger(__name__)

_PARENTS = {
    "life_area_id": (LifeArea, "Life area"),
    "goal_id": (Goal, "Goal"),
    "project_id": (Project, "Project"),
    "task_id": (Task, "Task"),
}

DEFAULT_SEARCH_LIMIT = 50


def list_notes(*, include_archived: bool = False, **parent) -> List[Note]:
    query = select(Note)
    for field in NOTE_PARENT_FIELDS:
        value = parent.get(field)
        if value:
            require_uuid(value, _PARENTS[field][1].lower())
            query = query.where(getattr(Note, field) == value)
    if not include_archived:
        query = query.where(Note.archived_at.is_(None))
    query = query.order_by(Note.updated_at.desc())
    return list(db.session.execute(query).scalars())


def search_notes(term: str, *, limit: int = DEFAULT_SEARCH_LIMIT) -> List[Note]:
    """Case-insensitive substring match on title or content, newest first."""
    term = term.strip()
    if not term:
        raise ValidationError("Search term cannot be empty")
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    pattern = f"%{escaped}%"
    query = (
        select(Note)
        .where(
            Note.archived_at.is_(None),
            or_(Note.title.ilike(pattern, escape="\\"), Note.content.ilike(pattern, escape="\\")),
        )
        .order_by(Note.updated_at.desc())
        .limit(min(limit, DEFAULT_SEARCH_LIMIT))
    )
    return list(db.session.execute(query).scalars())


def get_note(note_id: str) -> Note:
    return get_or_raise(Note, note_id, "Note")


def create_note(*, title: str, content: str = "", **parent) -> Note:
    given = {field: parent.get(field) for field in NOTE_PARENT_FIELDS if parent.get(field)}
    if len(given) != 1:
        raise ValidationError("A note must belong to exactly one life area, goal, project or task")
    (field, parent_id), = given.items()
    model, label = _PARENTS[field]
    get_or_raise(model, parent_id, label)
    note = Note(title=title, content=content, **{field: parent_id})
    db.session.add(note)
    db.session.commit()
    logger.info("Created note %s on %s %s", note.id, label.lower(), parent_id)
    return note


def update_note(note_id: str, **fields) -> Note:
    note = get_note(note_id)
    for key in ("title", "content"):
        if key in fields:
            if fields[key] is None:
                raise ValidationError(f"{key} cannot be null")
            setattr(note, key, fields[key])
    db.session.commit()
    return note


def archive_note(note_id: str) -> archive_service.CascadeSummary:
    require_uuid(note_id, "note")
    return archive_service.archive_note(note_id)


def restore_note(note_id: str) -> Note:
    require_uuid(note_id, "note")
    archive_service.restore("notes", note_id)
    return get_note(note_id)


def delete_note(note_id: str) -> None:
    require_uuid(note_id, "note")
    archive_service.hard_delete("notes", note_id)
