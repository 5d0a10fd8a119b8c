"""Project service layer."""

from __future__ import annotations

import logging
from typing import List

from sqlalchemy import case, func, select

from evorbrain.core.errors import NotFoundError, ValidationError
from evorbrain.core.hierarchy import archive_service
from evorbrain.core.utils.dates import utcnow
from evorbrain.core.utils.queries import get_or_raise, rank
from evorbrain.core.utils.validation import require_uuid
from evorbrain.domains.goals.models.goal_models import Goal
from evorbrain.domains.goals.services.goal_service import recompute_goal_progress
from evorbrain.domains.projects.models.project_models import PROJECT_STATUSES, Project, Task
from evorbrain.extensions import db

logger = logging.getLogger(__name__)

_UPDATABLE = ("goal_id", "title", "description", "status", "start_date", "due_date")


def list_projects(
    *, goal_id: str | None = None, status: str | None = None, include_archived: bool = False
) -> List[Project]:
    query = select(Project)
    if goal_id:
        require_uuid(goal_id, "goal")
        query = query.where(Project.goal_id == goal_id)
    if status:
        query = query.where(Project.status == status)
    if not include_archived:
        query = query.where(Project.archived_at.is_(None))
    query = query.order_by(
        rank(Project.status, PROJECT_STATUSES),
        Project.start_date.asc().nulls_last(),
        Project.title,
    )
    return list(db.session.execute(query).scalars())


def get_project(project_id: str) -> Project:
    return get_or_raise(Project, project_id, "Project")


def _apply_status(project: Project, status: str) -> None:
    if status != project.status:
        project.completed_at = utcnow() if status == "completed" else None
    project.status = status


def create_project(
    *,
    goal_id: str,
    title: str,
    description: str | None = None,
    status: str = "planning",
    start_date=None,
    due_date=None,
) -> Project:
    get_or_raise(Goal, goal_id, "Goal")
    if start_date and due_date and start_date > due_date:
        raise ValidationError("Start date must be before or equal to due date")
    project = Project(
        goal_id=goal_id,
        title=title,
        description=description,
        status="planning",
        start_date=start_date,
        due_date=due_date,
        progress=0,
    )
    _apply_status(project, status)
    db.session.add(project)
    db.session.commit()
    logger.info("Created project %s under goal %s", project.id, goal_id)
    return project


def update_project(project_id: str, **fields) -> Project:
    """Apply a partial update; moving to another goal recomputes both goals."""
    project = get_project(project_id)
    previous_goal = project.goal_id
    try:
        for key in _UPDATABLE:
            if key not in fields:
                continue
            value = fields[key]
            if key in ("goal_id", "title", "status") and value is None:
                raise ValidationError(f"{key} cannot be null")
            if key == "goal_id":
                get_or_raise(Goal, value, "Goal")
            if key == "status":
                _apply_status(project, value)
                continue
            setattr(project, key, value)
        if project.start_date and project.due_date and project.start_date > project.due_date:
            raise ValidationError("Start date must be before or equal to due date")
    except (ValidationError, NotFoundError):
        db.session.rollback()
        raise
    if project.goal_id != previous_goal:
        project.updated_at = utcnow()
        db.session.flush()
        recompute_goal_progress(previous_goal, commit=False)
        recompute_goal_progress(project.goal_id, commit=False)
    db.session.commit()
    return project


def recompute_project_progress(project_id: str, *, commit: bool = True) -> Project:
    """Completed share of the project's unarchived tasks, truncated to a percent.

    The parent goal's progress is recomputed in the same transaction.
    """
    project = get_project(project_id)
    total, completed = db.session.execute(
        select(
            func.count(Task.id),
            func.coalesce(func.sum(case((Task.status == "completed", 1), else_=0)), 0),
        ).where(Task.project_id == project_id, Task.archived_at.is_(None))
    ).one()
    project.progress = (completed * 100) // total if total else 0
    project.updated_at = utcnow()
    db.session.flush()
    recompute_goal_progress(project.goal_id, commit=False)
    if commit:
        db.session.commit()
    return project


def archive_project(project_id: str) -> archive_service.CascadeSummary:
    require_uuid(project_id, "project")
    return archive_service.archive_project_cascade(project_id)


def restore_project(project_id: str, *, cascade: bool = False) -> Project:
    require_uuid(project_id, "project")
    archive_service.restore("projects", project_id, cascade=cascade)
    return get_project(project_id)


def delete_project(project_id: str) -> None:
    require_uuid(project_id, "project")
    archive_service.hard_delete("projects", project_id)
