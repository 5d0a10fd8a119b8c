"""DTO mappers for life areas."""

from __future__ import annotations

from evorbrain.core.utils.dates import isoformat
from evorbrain.domains.life_areas.models.life_area_models import LifeArea


def map_life_area(life_area: LifeArea) -> dict:
    return {
        "id": life_area.id,
        "name": life_area.name,
        "description": life_area.description,
        "color": life_area.color,
        "icon": life_area.icon,
        "sort_order": life_area.sort_order,
        "created_at": isoformat(life_area.created_at),
        "updated_at": isoformat(life_area.updated_at),
        "archived_at": isoformat(life_area.archived_at),
    }
