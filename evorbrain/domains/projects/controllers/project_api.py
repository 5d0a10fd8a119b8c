"""Project API controllers."""

from __future__ import annotations

from flask import Blueprint, jsonify

from evorbrain.core.hierarchy.schemas import RestoreRequest
from evorbrain.core.utils.requests import parse_body, parse_query
from evorbrain.domains.projects import services
from evorbrain.domains.projects.mappers import map_project
from evorbrain.domains.projects.schemas.project_schemas import (
    ProjectCreate,
    ProjectListFilter,
    ProjectUpdate,
)

project_api_bp = Blueprint("project_api", __name__)


@project_api_bp.get("")
def list_projects():
    params = parse_query(ProjectListFilter)
    items = services.list_projects(
        goal_id=params.goal_id,
        status=params.status,
        include_archived=params.include_archived,
    )
    return jsonify({"ok": True, "items": [map_project(p) for p in items], "total": len(items)})


@project_api_bp.post("")
def create_project():
    data = parse_body(ProjectCreate)
    project = services.create_project(**data.model_dump())
    return jsonify({"ok": True, "project": map_project(project)}), 201


@project_api_bp.get("/<project_id>")
def get_project(project_id: str):
    return jsonify({"ok": True, "project": map_project(services.get_project(project_id))})


@project_api_bp.patch("/<project_id>")
def update_project(project_id: str):
    data = parse_body(ProjectUpdate)
    project = services.update_project(project_id, **data.model_dump(exclude_unset=True))
    return jsonify({"ok": True, "project": map_project(project)})


@project_api_bp.post("/<project_id>/progress")
def recompute_progress(project_id: str):
    project = services.recompute_project_progress(project_id)
    return jsonify({"ok": True, "project": map_project(project)})


@project_api_bp.post("/<project_id>/archive")
def archive_project(project_id: str):
    summary = services.archive_project(project_id)
    return jsonify({"ok": True, "archive": summary.to_dict()})


@project_api_bp.post("/<project_id>/restore")
def restore_project(project_id: str):
    data = parse_body(RestoreRequest)
    project = services.restore_project(project_id, cascade=data.cascade)
    return jsonify({"ok": True, "project": map_project(project)})


@project_api_bp.delete("/<project_id>")
def delete_project(project_id: str):
    services.delete_project(project_id)
    return jsonify({"ok": True})
