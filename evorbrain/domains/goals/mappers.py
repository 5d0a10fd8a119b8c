"""DTO mappers for goals."""

from __future__ import annotations

from evorbrain.core.utils.dates import isoformat
from evorbrain.domains.goals.models.goal_models import Goal


def map_goal(goal: Goal) -> dict:
    return {
        "id": goal.id,
        "life_area_id": goal.life_area_id,
        "title": goal.title,
        "description": goal.description,
        "target_date": isoformat(goal.target_date),
        "status": goal.status,
        "progress": goal.progress,
        "created_at": isoformat(goal.created_at),
        "updated_at": isoformat(goal.updated_at),
        "completed_at": isoformat(goal.completed_at),
        "archived_at": isoformat(goal.archived_at),
    }
