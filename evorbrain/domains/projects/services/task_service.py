"""Task service layer."""

from __future__ import annotations

import logging
from typing import Iterable, List, Sequence, Set

from sqlalchemy import select

from evorbrain.core.errors import NotFoundError, ValidationError
from evorbrain.core.hierarchy import archive_service
from evorbrain.core.utils.dates import day_bounds, today, utcnow
from evorbrain.core.utils.queries import get_or_raise, rank
from evorbrain.core.utils.validation import require_uuid
from evorbrain.domains.projects.models.project_models import TASK_STATUSES, Project, Task
from evorbrain.domains.projects.services.project_service import recompute_project_progress
from evorbrain.extensions import db

logger = logging.getLogger(__name__)

# Most urgent first.
_PRIORITY_ORDER = ("urgent", "high", "medium", "low")
_OPEN_STATUSES = ("todo", "in_progress")
_UPDATABLE = (
    "project_id",
    "parent_task_id",
    "title",
    "description",
    "status",
    "priority",
    "due_date",
    "estimated_minutes",
    "actual_minutes",
)


def _ordered(query):
    return query.order_by(
        rank(Task.status, TASK_STATUSES),
        rank(Task.priority, _PRIORITY_ORDER),
        Task.due_date.asc().nulls_last(),
        Task.title,
    )


def list_tasks(
    *,
    project_id: str | None = None,
    parent_task_id: str | None = None,
    status: str | None = None,
    priority: str | None = None,
    include_archived: bool = False,
) -> List[Task]:
    query = select(Task)
    if project_id:
        require_uuid(project_id, "project")
        query = query.where(Task.project_id == project_id)
    if parent_task_id:
        require_uuid(parent_task_id, "task")
        query = query.where(Task.parent_task_id == parent_task_id)
    if status:
        query = query.where(Task.status == status)
    if priority:
        query = query.where(Task.priority == priority)
    if not include_archived:
        query = query.where(Task.archived_at.is_(None))
    return list(db.session.execute(_ordered(query)).scalars())


def tasks_due_today() -> List[Task]:
    start, end = day_bounds(today())
    query = select(Task).where(
        Task.archived_at.is_(None),
        Task.status.in_(_OPEN_STATUSES),
        Task.due_date >= start,
        Task.due_date < end,
    )
    return list(db.session.execute(_ordered(query)).scalars())


def overdue_tasks() -> List[Task]:
    query = select(Task).where(
        Task.archived_at.is_(None),
        Task.status.in_(_OPEN_STATUSES),
        Task.due_date < utcnow(),
    )
    return list(db.session.execute(_ordered(query)).scalars())


def get_task(task_id: str) -> Task:
    return get_or_raise(Task, task_id, "Task")


def _apply_status(task: Task, status: str) -> None:
    task.status = status
    task.completed_at = (task.completed_at or utcnow()) if status == "completed" else None


def _resolve_parent(task_id: str | None, parent_task_id: str, project_id: str | None) -> str | None:
    """Validate a parent task and return the project the subtask belongs to."""
    if task_id is not None and parent_task_id == task_id:
        raise ValidationError("A task cannot be its own parent")
    parent = get_or_raise(Task, parent_task_id, "Parent task")
    if task_id is not None:
        # Walk upward to refuse cycles.
        ancestor = parent
        while ancestor.parent_task_id:
            if ancestor.parent_task_id == task_id:
                raise ValidationError("A task cannot be moved beneath its own subtask")
            ancestor = db.session.get(Task, ancestor.parent_task_id)
            if ancestor is None:
                break
    if project_id is not None and project_id != parent.project_id:
        raise ValidationError("Subtasks must belong to the same project as their parent")
    return parent.project_id


def _move_subtasks(task: Task) -> Set[str | None]:
    """Put every transitive subtask of ``task`` into its project.

    Returns the projects the subtasks were taken from.
    """
    ids = archive_service.collect_descendants("tasks", task.id)["tasks"]
    if not ids:
        return set()
    previous: Set[str | None] = set()
    for subtask in db.session.execute(select(Task).where(Task.id.in_(sorted(ids)))).scalars():
        if subtask.project_id != task.project_id:
            previous.add(subtask.project_id)
            subtask.project_id = task.project_id
            subtask.updated_at = task.updated_at
    return previous


def _recompute(project_ids: Iterable[str | None]) -> None:
    for project_id in sorted({p for p in project_ids if p}):
        if db.session.get(Project, project_id) is not None:
            recompute_project_progress(project_id, commit=False)


def create_task(
    *,
    title: str,
    project_id: str | None = None,
    parent_task_id: str | None = None,
    description: str | None = None,
    status: str = "todo",
    priority: str = "medium",
    due_date=None,
    estimated_minutes: int | None = None,
) -> Task:
    if project_id is not None:
        get_or_raise(Project, project_id, "Project")
    if parent_task_id is not None:
        project_id = _resolve_parent(None, parent_task_id, project_id)
    task = Task(
        project_id=project_id,
        parent_task_id=parent_task_id,
        title=title,
        description=description,
        priority=priority,
        due_date=due_date,
        estimated_minutes=estimated_minutes,
    )
    _apply_status(task, status)
    db.session.add(task)
    db.session.flush()
    _recompute([project_id])
    db.session.commit()
    logger.info("Created task %s (project=%s, parent=%s)", task.id, project_id, parent_task_id)
    return task


def update_task(task_id: str, **fields) -> Task:
    """Apply a partial update.

    Setting status to ``completed`` stamps ``completed_at``; any other status
    clears it. A subtask cannot leave its parent's project; moving a task
    takes its subtasks along. Progress of every project touched is
    recomputed.
    """
    task = get_task(task_id)
    previous_project = task.project_id
    affected: Set[str | None] = {previous_project}
    try:
        for key in _UPDATABLE:
            if key not in fields:
                continue
            value = fields[key]
            if key in ("title", "status", "priority") and value is None:
                raise ValidationError(f"{key} cannot be null")
            if key == "status":
                _apply_status(task, value)
            elif key == "project_id":
                if value is not None:
                    get_or_raise(Project, value, "Project")
                if task.parent_task_id is not None and "parent_task_id" not in fields:
                    parent = get_or_raise(Task, task.parent_task_id, "Parent task")
                    if value != parent.project_id:
                        raise ValidationError("Subtasks must belong to the same project as their parent")
                task.project_id = value
            elif key == "parent_task_id":
                if value is not None:
                    task.project_id = _resolve_parent(task.id, value, fields.get("project_id"))
                task.parent_task_id = value
            else:
                setattr(task, key, value)
    except (ValidationError, NotFoundError):
        db.session.rollback()
        raise
    task.updated_at = utcnow()
    if task.project_id != previous_project:
        affected |= _move_subtasks(task)
    affected.add(task.project_id)
    db.session.flush()
    _recompute(affected)
    db.session.commit()
    return task


def toggle_task_complete(task_id: str) -> Task:
    task = get_task(task_id)
    return update_task(task_id, status="todo" if task.status == "completed" else "completed")


def bulk_update_tasks(
    ids: Sequence[str],
    *,
    project_id: str | None = None,
    status: str | None = None,
    priority: str | None = None,
) -> int:
    """Apply the same status/priority/project change to many tasks at once.

    A subtask may only change project together with its parent; moved tasks
    take their own subtasks along.
    """
    for task_id in ids:
        require_uuid(task_id, "task")
    if project_id is not None:
        get_or_raise(Project, project_id, "Project")
    tasks = list(db.session.execute(select(Task).where(Task.id.in_(list(ids)))).scalars())
    found = {t.id for t in tasks}
    missing = [i for i in ids if i not in found]
    if missing:
        raise NotFoundError("Task", missing[0])
    if project_id is not None:
        for task in tasks:
            if task.parent_task_id is None or task.parent_task_id in found:
                continue
            parent = db.session.get(Task, task.parent_task_id)
            if parent is not None and parent.project_id != project_id:
                raise ValidationError("Subtasks must belong to the same project as their parent")

    affected: Set[str | None] = set()
    now = utcnow()
    for task in tasks:
        affected.add(task.project_id)
        if project_id is not None:
            task.project_id = project_id
        if status is not None:
            _apply_status(task, status)
        if priority is not None:
            task.priority = priority
        task.updated_at = now
        affected.add(task.project_id)
    if project_id is not None:
        for task in tasks:
            affected |= _move_subtasks(task)
    db.session.flush()
    _recompute(affected)
    db.session.commit()
    logger.info("Bulk updated %d task(s)", len(tasks))
    return len(tasks)


def archive_task(task_id: str) -> archive_service.CascadeSummary:
    require_uuid(task_id, "task")
    return archive_service.archive_task_cascade(task_id)


def restore_task(task_id: str, *, cascade: bool = False) -> Task:
    require_uuid(task_id, "task")
    archive_service.restore("tasks", task_id, cascade=cascade)
    return get_task(task_id)


def delete_task(task_id: str) -> None:
    require_uuid(task_id, "task")
    archive_service.hard_delete("tasks", task_id)
