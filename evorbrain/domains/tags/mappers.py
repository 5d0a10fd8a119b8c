"""DTO mappers for tags."""

from __future__ import annotations

from evorbrain.core.utils.dates import isoformat
from evorbrain.domains.tags.models.tag_models import Tag


def map_tag(tag: Tag) -> dict:
    return {
        "id": tag.id,
        "name": tag.name,
        "color": tag.color,
        "created_at": isoformat(tag.created_at),
    }
