"""Task API controllers."""

from __future__ import annotations

from flask import Blueprint, jsonify

from evorbrain.core.hierarchy.schemas import RestoreRequest
from evorbrain.core.utils.requests import parse_body, parse_query
from evorbrain.domains.projects import services
from evorbrain.domains.projects.mappers import map_task
from evorbrain.domains.projects.schemas.project_schemas import (
    TaskBulkUpdate,
    TaskCreate,
    TaskListFilter,
    TaskUpdate,
)

task_api_bp = Blueprint("task_api", __name__)


def _items(tasks):
    return jsonify({"ok": True, "items": [map_task(t) for t in tasks], "total": len(tasks)})


@task_api_bp.get("")
def list_tasks():
    params = parse_query(TaskListFilter)
    return _items(services.list_tasks(**params.model_dump()))


@task_api_bp.get("/due-today")
def due_today():
    return _items(services.tasks_due_today())


@task_api_bp.get("/overdue")
def overdue():
    return _items(services.overdue_tasks())


@task_api_bp.post("")
def create_task():
    data = parse_body(TaskCreate)
    task = services.create_task(**data.model_dump())
    return jsonify({"ok": True, "task": map_task(task)}), 201


@task_api_bp.post("/bulk-update")
def bulk_update():
    data = parse_body(TaskBulkUpdate)
    updated = services.bulk_update_tasks(
        data.ids, project_id=data.project_id, status=data.status, priority=data.priority
    )
    return jsonify({"ok": True, "updated": updated})


@task_api_bp.get("/<task_id>")
def get_task(task_id: str):
    return jsonify({"ok": True, "task": map_task(services.get_task(task_id))})


@task_api_bp.patch("/<task_id>")
def update_task(task_id: str):
    data = parse_body(TaskUpdate)
    task = services.update_task(task_id, **data.model_dump(exclude_unset=True))
    return jsonify({"ok": True, "task": map_task(task)})


@task_api_bp.post("/<task_id>/toggle")
def toggle_complete(task_id: str):
    return jsonify({"ok": True, "task": map_task(services.toggle_task_complete(task_id))})


@task_api_bp.post("/<task_id>/archive")
def archive_task(task_id: str):
    summary = services.archive_task(task_id)
    return jsonify({"ok": True, "archive": summary.to_dict()})


@task_api_bp.post("/<task_id>/restore")
def restore_task(task_id: str):
    data = parse_body(RestoreRequest)
    task = services.restore_task(task_id, cascade=data.cascade)
    return jsonify({"ok": True, "task": map_task(task)})


@task_api_bp.delete("/<task_id>")
def delete_task(task_id: str):
    services.delete_task(task_id)
    return jsonify({"ok": True})
