"""DTO mappers for projects and tasks."""

from __future__ import annotations

from evorbrain.core.utils.dates import isoformat
from evorbrain.domains.projects.models.project_models import Project, Task
from evorbrain.domains.tags.mappers import map_tag


def map_project(project: Project) -> dict:
    return {
        "id": project.id,
        "goal_id": project.goal_id,
        "title": project.title,
        "description": project.description,
        "status": project.status,
        "start_date": isoformat(project.start_date),
        "due_date": isoformat(project.due_date),
        "progress": project.progress,
        "tags": [map_tag(t) for t in project.tags],
        "created_at": isoformat(project.created_at),
        "updated_at": isoformat(project.updated_at),
        "completed_at": isoformat(project.completed_at),
        "archived_at": isoformat(project.archived_at),
    }


def map_task(task: Task) -> dict:
    return {
        "id": task.id,
        "project_id": task.project_id,
        "parent_task_id": task.parent_task_id,
        "title": task.title,
        "description": task.description,
        "status": task.status,
        "priority": task.priority,
        "due_date": isoformat(task.due_date),
        "estimated_minutes": task.estimated_minutes,
        "actual_minutes": task.actual_minutes,
        "tags": [map_tag(t) for t in task.tags],
        "created_at": isoformat(task.created_at),
        "updated_at": isoformat(task.updated_at),
        "completed_at": isoformat(task.completed_at),
        "archived_at": isoformat(task.archived_at),
    }
