"""Goal service layer."""

from __future__ import annotations

import logging
from typing import List

from sqlalchemy import func, select

from evorbrain.core.errors import NotFoundError, ValidationError
from evorbrain.core.hierarchy import archive_service
from evorbrain.core.utils.dates import utcnow
from evorbrain.core.utils.queries import get_or_raise, rank
from evorbrain.core.utils.validation import require_uuid
from evorbrain.domains.goals.models.goal_models import GOAL_STATUSES, Goal
from evorbrain.domains.life_areas.models.life_area_models import LifeArea
from evorbrain.domains.projects.models.project_models import Project
from evorbrain.extensions import db

logger = logging.getLogger(__name__)

_UPDATABLE = ("life_area_id", "title", "description", "target_date", "status", "progress")


def list_goals(
    *, life_area_id: str | None = None, status: str | None = None, include_archived: bool = False
) -> List[Goal]:
    query = select(Goal)
    if life_area_id:
        require_uuid(life_area_id, "life area")
        query = query.where(Goal.life_area_id == life_area_id)
    if status:
        query = query.where(Goal.status == status)
    if not include_archived:
        query = query.where(Goal.archived_at.is_(None))
    query = query.order_by(
        rank(Goal.status, GOAL_STATUSES),
        Goal.target_date.asc().nulls_last(),
        Goal.title,
    )
    return list(db.session.execute(query).scalars())


def get_goal(goal_id: str) -> Goal:
    return get_or_raise(Goal, goal_id, "Goal")


def _apply_status(goal: Goal, status: str) -> None:
    if status != goal.status:
        goal.completed_at = utcnow() if status == "completed" else None
    goal.status = status


def create_goal(
    *,
    life_area_id: str,
    title: str,
    description: str | None = None,
    target_date=None,
    status: str = "active",
) -> Goal:
    get_or_raise(LifeArea, life_area_id, "Life area")
    goal = Goal(
        life_area_id=life_area_id,
        title=title,
        description=description,
        target_date=target_date,
        status="active",
        progress=0,
    )
    _apply_status(goal, status)
    db.session.add(goal)
    db.session.commit()
    logger.info("Created goal %s in life area %s", goal.id, life_area_id)
    return goal


def update_goal(goal_id: str, **fields) -> Goal:
    goal = get_goal(goal_id)
    try:
        for key in _UPDATABLE:
            if key not in fields:
                continue
            value = fields[key]
            if key in ("life_area_id", "title", "status", "progress") and value is None:
                raise ValidationError(f"{key} cannot be null")
            if key == "life_area_id":
                get_or_raise(LifeArea, value, "Life area")
            if key == "status":
                _apply_status(goal, value)
                continue
            setattr(goal, key, value)
    except (ValidationError, NotFoundError):
        db.session.rollback()
        raise
    db.session.commit()
    return goal


def recompute_goal_progress(goal_id: str, *, commit: bool = True) -> Goal:
    """Set progress to the truncated average of the goal's unarchived projects."""
    goal = get_goal(goal_id)
    average = db.session.execute(
        select(func.avg(Project.progress)).where(
            Project.goal_id == goal_id, Project.archived_at.is_(None)
        )
    ).scalar()
    goal.progress = int(average or 0)
    goal.updated_at = utcnow()
    if commit:
        db.session.commit()
    return goal


def archive_goal(goal_id: str) -> archive_service.CascadeSummary:
    require_uuid(goal_id, "goal")
    return archive_service.archive_goal_cascade(goal_id)


def restore_goal(goal_id: str, *, cascade: bool = False) -> Goal:
    require_uuid(goal_id, "goal")
    archive_service.restore("goals", goal_id, cascade=cascade)
    return get_goal(goal_id)


def delete_goal(goal_id: str) -> None:
    require_uuid(goal_id, "goal")
    archive_service.hard_delete("goals", goal_id)
