"""Life area models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from evorbrain.core.utils.dates import utcnow
from evorbrain.core.utils.validation import new_id
from evorbrain.extensions import db


class LifeArea(db.Model):
    __tablename__ = "life_areas"

    id: Mapped[str] = mapped_column(db.String(36), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(db.Text, nullable=False)
    description: Mapped[str | None] = mapped_column(db.Text)
    color: Mapped[str | None] = mapped_column(db.Text)
    icon: Mapped[str | None] = mapped_column(db.Text)
    sort_order: Mapped[int] = mapped_column(db.Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)
    archived_at: Mapped[datetime | None] = mapped_column(db.DateTime)


__all__ = ["LifeArea"]
