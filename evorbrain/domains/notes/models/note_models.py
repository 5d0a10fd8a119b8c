"""Note models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from evorbrain.core.utils.dates import utcnow
from evorbrain.core.utils.validation import new_id
from evorbrain.extensions import db

# Exactly one of these is set on every note.
NOTE_PARENT_FIELDS = ("life_area_id", "goal_id", "project_id", "task_id")


class Note(db.Model):
    __tablename__ = "notes"

    id: Mapped[str] = mapped_column(db.String(36), primary_key=True, default=new_id)
    task_id: Mapped[str | None] = mapped_column(db.ForeignKey("tasks.id", ondelete="CASCADE"), index=True)
    project_id: Mapped[str | None] = mapped_column(db.ForeignKey("projects.id", ondelete="CASCADE"), index=True)
    goal_id: Mapped[str | None] = mapped_column(db.ForeignKey("goals.id", ondelete="CASCADE"), index=True)
    life_area_id: Mapped[str | None] = mapped_column(
        db.ForeignKey("life_areas.id", ondelete="CASCADE"), index=True
    )
    title: Mapped[str] = mapped_column(db.Text, nullable=False)
    content: Mapped[str] = mapped_column(db.Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)
    archived_at: Mapped[datetime | None] = mapped_column(db.DateTime)

    @property
    def parent(self) -> tuple[str, str] | None:
        for field in NOTE_PARENT_FIELDS:
            value = getattr(self, field)
            if value:
                return field, value
        return None


__all__ = ["Note", "NOTE_PARENT_FIELDS"]
