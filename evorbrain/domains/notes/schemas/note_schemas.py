"""Note schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from evorbrain.core.utils.validation import NOTE_CONTENT_MAX_LENGTH, NOTE_TITLE_MAX_LENGTH, clean_name
from evorbrain.domains.notes.models.note_models import NOTE_PARENT_FIELDS


def _parent_count(data) -> int:
    return sum(1 for field in NOTE_PARENT_FIELDS if getattr(data, field) is not None)


class NoteCreate(BaseModel):
    life_area_id: Optional[str] = None
    goal_id: Optional[str] = None
    project_id: Optional[str] = None
    task_id: Optional[str] = None
    title: str
    content: str = Field(default="", max_length=NOTE_CONTENT_MAX_LENGTH)

    @field_validator("title")
    @classmethod
    def check_title(cls, value: str) -> str:
        return clean_name(value, field="Title", max_length=NOTE_TITLE_MAX_LENGTH)

    @model_validator(mode="after")
    def check_parent(self):
        if _parent_count(self) != 1:
            raise ValueError("A note must belong to exactly one life area, goal, project or task")
        return self


class NoteUpdate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = Field(default=None, max_length=NOTE_CONTENT_MAX_LENGTH)

    @field_validator("title")
    @classmethod
    def check_title(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return clean_name(value, field="Title", max_length=NOTE_TITLE_MAX_LENGTH)


class NoteListFilter(BaseModel):
    life_area_id: Optional[str] = None
    goal_id: Optional[str] = None
    project_id: Optional[str] = None
    task_id: Optional[str] = None
    include_archived: bool = False

    @model_validator(mode="after")
    def check_parent(self):
        if _parent_count(self) > 1:
            raise ValueError("Filter by at most one parent")
        return self


class NoteSearch(BaseModel):
    q: str = Field(min_length=1, max_length=200)
    limit: int = Field(default=50, ge=1, le=50)
