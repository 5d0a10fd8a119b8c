"""Goal models."""

from __future__ import annotations

from datetime import date, datetime

from sqlalchemy.orm import Mapped, mapped_column

from evorbrain.core.utils.dates import utcnow
from evorbrain.core.utils.validation import new_id
from evorbrain.extensions import db

GOAL_STATUSES = ("active", "paused", "completed", "cancelled")


class Goal(db.Model):
    __tablename__ = "goals"

    id: Mapped[str] = mapped_column(db.String(36), primary_key=True, default=new_id)
    life_area_id: Mapped[str] = mapped_column(
        db.ForeignKey("life_areas.id", ondelete="CASCADE"), index=True, nullable=False
    )
    title: Mapped[str] = mapped_column(db.Text, nullable=False)
    description: Mapped[str | None] = mapped_column(db.Text)
    target_date: Mapped[date | None] = mapped_column(db.Date)
    status: Mapped[str] = mapped_column(db.Text, default="active", nullable=False)
    progress: Mapped[int] = mapped_column(db.Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)
    completed_at: Mapped[datetime | None] = mapped_column(db.DateTime)
    archived_at: Mapped[datetime | None] = mapped_column(db.DateTime)


__all__ = ["Goal", "GOAL_STATUSES"]
