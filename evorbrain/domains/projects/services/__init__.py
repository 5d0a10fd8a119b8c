from evorbrain.domains.projects.services.project_service import (
    archive_project,
    create_project,
    delete_project,
    get_project,
    list_projects,
    recompute_project_progress,
    restore_project,
    update_project,
)
from evorbrain.domains.projects.services.task_service import (
    archive_task,
    bulk_update_tasks,
    create_task,
    delete_task,
    get_task,
    list_tasks,
    overdue_tasks,
    restore_task,
    tasks_due_today,
    toggle_task_complete,
    update_task,
)

__all__ = [
    "create_project",
    "update_project",
    "archive_project",
    "restore_project",
    "get_project",
    "list_projects",
    "delete_project",
    "recompute_project_progress",
    "create_task",
    "update_task",
    "toggle_task_complete",
    "bulk_update_tasks",
    "get_task",
    "list_tasks",
    "tasks_due_today",
    "overdue_tasks",
    "archive_task",
    "restore_task",
    "delete_task",
]
