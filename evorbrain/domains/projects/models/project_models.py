"""Project and task models."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy.orm import Mapped, mapped_column, relationship

from evorbrain.core.utils.dates import utcnow
from evorbrain.core.utils.validation import new_id
from evorbrain.domains.tags.models.tag_models import Tag, project_tags, task_tags
from evorbrain.extensions import db

PROJECT_STATUSES = ("planning", "active", "on_hold", "completed", "cancelled")
TASK_STATUSES = ("todo", "in_progress", "completed", "cancelled")
TASK_PRIORITIES = ("low", "medium", "high", "urgent")


class Project(db.Model):
    __tablename__ = "projects"

    id: Mapped[str] = mapped_column(db.String(36), primary_key=True, default=new_id)
    goal_id: Mapped[str] = mapped_column(
        db.ForeignKey("goals.id", ondelete="CASCADE"), index=True, nullable=False
    )
    title: Mapped[str] = mapped_column(db.Text, nullable=False)
    description: Mapped[str | None] = mapped_column(db.Text)
    status: Mapped[str] = mapped_column(db.Text, default="planning", nullable=False)
    start_date: Mapped[date | None] = mapped_column(db.Date)
    due_date: Mapped[date | None] = mapped_column(db.Date)
    progress: Mapped[int] = mapped_column(db.Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)
    completed_at: Mapped[datetime | None] = mapped_column(db.DateTime)
    archived_at: Mapped[datetime | None] = mapped_column(db.DateTime)

    tags: Mapped[list[Tag]] = relationship(Tag, secondary=project_tags, lazy="selectin", passive_deletes=True)


class Task(db.Model):
    __tablename__ = "tasks"

    id: Mapped[str] = mapped_column(db.String(36), primary_key=True, default=new_id)
    project_id: Mapped[str | None] = mapped_column(
        db.ForeignKey("projects.id", ondelete="CASCADE"), index=True
    )
    parent_task_id: Mapped[str | None] = mapped_column(
        db.ForeignKey("tasks.id", ondelete="CASCADE"), index=True
    )
    title: Mapped[str] = mapped_column(db.Text, nullable=False)
    description: Mapped[str | None] = mapped_column(db.Text)
    status: Mapped[str] = mapped_column(db.Text, default="todo", nullable=False)
    priority: Mapped[str] = mapped_column(db.Text, default="medium", nullable=False)
    due_date: Mapped[datetime | None] = mapped_column(db.DateTime)
    estimated_minutes: Mapped[int | None] = mapped_column(db.Integer)
    actual_minutes: Mapped[int | None] = mapped_column(db.Integer)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)
    completed_at: Mapped[datetime | None] = mapped_column(db.DateTime)
    archived_at: Mapped[datetime | None] = mapped_column(db.DateTime)

    tags: Mapped[list[Tag]] = relationship(Tag, secondary=task_tags, lazy="selectin", passive_deletes=True)


__all__ = ["Project", "Task", "PROJECT_STATUSES", "TASK_STATUSES", "TASK_PRIORITIES"]
