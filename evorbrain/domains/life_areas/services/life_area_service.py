"""Life area service layer."""

from __future__ import annotations

import logging
from typing import List, Sequence

from sqlalchemy import select

from evorbrain.core.errors import NotFoundError, ValidationError
from evorbrain.core.hierarchy import archive_service
from evorbrain.core.utils.queries import get_or_raise, max_value
from evorbrain.core.utils.validation import require_uuid
from evorbrain.domains.life_areas.models.life_area_models import LifeArea
from evorbrain.extensions import db

logger = logging.getLogger(__name__)

_UPDATABLE = ("name", "description", "color", "icon")


def list_life_areas(*, include_archived: bool = False) -> List[LifeArea]:
    query = select(LifeArea)
    if not include_archived:
        query = query.where(LifeArea.archived_at.is_(None))
    query = query.order_by(LifeArea.sort_order, LifeArea.name)
    return list(db.session.execute(query).scalars())


def get_life_area(life_area_id: str) -> LifeArea:
    return get_or_raise(LifeArea, life_area_id, "Life area")


def create_life_area(
    *, name: str, description: str | None = None, color: str | None = None, icon: str | None = None
) -> LifeArea:
    life_area = LifeArea(
        name=name,
        description=description,
        color=color,
        icon=icon,
        sort_order=max_value(LifeArea.sort_order) + 1,
    )
    db.session.add(life_area)
    db.session.commit()
    logger.info("Created life area %s", life_area.id)
    return life_area


def update_life_area(life_area_id: str, **fields) -> LifeArea:
    life_area = get_life_area(life_area_id)
    for key in _UPDATABLE:
        if key in fields:
            if key == "name" and fields[key] is None:
                raise ValidationError("Name cannot be empty")
            setattr(life_area, key, fields[key])
    db.session.commit()
    return life_area


def reorder_life_areas(ids: Sequence[str]) -> List[LifeArea]:
    """Assign ``sort_order`` from the position of each id in ``ids``."""
    if len(set(ids)) != len(ids):
        raise ValidationError("Duplicate life area IDs in reorder request")
    for life_area_id in ids:
        require_uuid(life_area_id, "life area")
    rows = {
        area.id: area
        for area in db.session.execute(select(LifeArea).where(LifeArea.id.in_(list(ids)))).scalars()
    }
    missing = [i for i in ids if i not in rows]
    if missing:
        db.session.rollback()
        raise NotFoundError("Life area", missing[0])
    for position, life_area_id in enumerate(ids):
        rows[life_area_id].sort_order = position
    db.session.commit()
    return [rows[i] for i in ids]


def archive_life_area(life_area_id: str) -> archive_service.CascadeSummary:
    require_uuid(life_area_id, "life area")
    return archive_service.archive_life_area_cascade(life_area_id)


def restore_life_area(life_area_id: str, *, cascade: bool = False) -> LifeArea:
    require_uuid(life_area_id, "life area")
    archive_service.restore("life_areas", life_area_id, cascade=cascade)
    return get_life_area(life_area_id)


def delete_life_area(life_area_id: str) -> None:
    require_uuid(life_area_id, "life area")
    archive_service.hard_delete("life_areas", life_area_id)
