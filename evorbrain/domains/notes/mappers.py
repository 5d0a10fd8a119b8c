"""DTO mappers for notes."""

from __future__ import annotations

from evorbrain.core.utils.dates import isoformat
from evorbrain.domains.notes.models.note_models import Note


def map_note(note: Note) -> dict:
    return {
        "id": note.id,
        "life_area_id": note.life_area_id,
        "goal_id": note.goal_id,
        "project_id": note.project_id,
        "task_id": note.task_id,
        "title": note.title,
        "content": note.content,
        "created_at": isoformat(note.created_at),
        "updated_at": isoformat(note.updated_at),
        "archived_at": isoformat(note.archived_at),
    }
