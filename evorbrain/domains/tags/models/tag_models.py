"""Tag models and junction tables."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from evorbrain.core.utils.dates import utcnow
from evorbrain.core.utils.validation import new_id
from evorbrain.extensions import db

task_tags = db.Table(
    "task_tags",
    db.Column("task_id", db.String(36), db.ForeignKey("tasks.id", ondelete="CASCADE"), primary_key=True),
    db.Column("tag_id", db.String(36), db.ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)

project_tags = db.Table(
    "project_tags",
    db.Column("project_id", db.String(36), db.ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True),
    db.Column("tag_id", db.String(36), db.ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)


class Tag(db.Model):
    __tablename__ = "tags"

    id: Mapped[str] = mapped_column(db.String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(db.Text, unique=True, nullable=False)
    color: Mapped[str | None] = mapped_column(db.Text)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)


__all__ = ["Tag", "task_tags", "project_tags"]
