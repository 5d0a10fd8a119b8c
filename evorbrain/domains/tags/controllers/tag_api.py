"""Tag API controllers."""

from __future__ import annotations

from flask import Blueprint, jsonify

from evorbrain.core.utils.requests import parse_body
from evorbrain.domains.projects.mappers import map_project, map_task
from evorbrain.domains.tags.mappers import map_tag
from evorbrain.domains.tags.schemas.tag_schemas import TagCreate
from evorbrain.domains.tags.services import tag_service as services

tag_api_bp = Blueprint("tag_api", __name__)


@tag_api_bp.get("")
def list_tags():
    items = services.list_tags()
    return jsonify({"ok": True, "items": [map_tag(t) for t in items], "total": len(items)})


@tag_api_bp.post("")
def create_tag():
    data = parse_body(TagCreate)
    return jsonify({"ok": True, "tag": map_tag(services.create_tag(**data.model_dump()))}), 201


@tag_api_bp.delete("/<tag_id>")
def delete_tag(tag_id: str):
    services.delete_tag(tag_id)
    return jsonify({"ok": True})


@tag_api_bp.put("/<tag_id>/tasks/<task_id>")
def tag_task(tag_id: str, task_id: str):
    return jsonify({"ok": True, "task": map_task(services.tag_task(task_id, tag_id))})


@tag_api_bp.delete("/<tag_id>/tasks/<task_id>")
def untag_task(tag_id: str, task_id: str):
    return jsonify({"ok": True, "task": map_task(services.untag_task(task_id, tag_id))})


@tag_api_bp.put("/<tag_id>/projects/<project_id>")
def tag_project(tag_id: str, project_id: str):
    return jsonify({"ok": True, "project": map_project(services.tag_project(project_id, tag_id))})


@tag_api_bp.delete("/<tag_id>/projects/<project_id>")
def untag_project(tag_id: str, project_id: str):
    return jsonify({"ok": True, "project": map_project(services.untag_project(project_id, tag_id))})
