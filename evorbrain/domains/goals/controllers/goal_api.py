"""Goal API controllers."""

from __future__ import annotations

from flask import Blueprint, jsonify

from evorbrain.core.hierarchy.schemas import RestoreRequest
from evorbrain.core.utils.requests import parse_body, parse_query
from evorbrain.domains.goals.mappers import map_goal
from evorbrain.domains.goals.schemas.goal_schemas import GoalCreate, GoalListFilter, GoalUpdate
from evorbrain.domains.goals.services import goal_service as services

goal_api_bp = Blueprint("goal_api", __name__)


@goal_api_bp.get("")
def list_goals():
    params = parse_query(GoalListFilter)
    items = services.list_goals(
        life_area_id=params.life_area_id,
        status=params.status,
        include_archived=params.include_archived,
    )
    return jsonify({"ok": True, "items": [map_goal(g) for g in items], "total": len(items)})


@goal_api_bp.post("")
def create_goal():
    data = parse_body(GoalCreate)
    goal = services.create_goal(**data.model_dump())
    return jsonify({"ok": True, "goal": map_goal(goal)}), 201


@goal_api_bp.get("/<goal_id>")
def get_goal(goal_id: str):
    return jsonify({"ok": True, "goal": map_goal(services.get_goal(goal_id))})


@goal_api_bp.patch("/<goal_id>")
def update_goal(goal_id: str):
    data = parse_body(GoalUpdate)
    goal = services.update_goal(goal_id, **data.model_dump(exclude_unset=True))
    return jsonify({"ok": True, "goal": map_goal(goal)})


@goal_api_bp.post("/<goal_id>/progress")
def recompute_progress(goal_id: str):
    goal = services.recompute_goal_progress(goal_id)
    return jsonify({"ok": True, "goal": map_goal(goal)})


@goal_api_bp.post("/<goal_id>/archive")
def archive_goal(goal_id: str):
    summary = services.archive_goal(goal_id)
    return jsonify({"ok": True, "archive": summary.to_dict()})


@goal_api_bp.post("/<goal_id>/restore")
def restore_goal(goal_id: str):
    data = parse_body(RestoreRequest)
    goal = services.restore_goal(goal_id, cascade=data.cascade)
    return jsonify({"ok": True, "goal": map_goal(goal)})


@goal_api_bp.delete("/<goal_id>")
def delete_goal(goal_id: str):
    services.delete_goal(goal_id)
    return jsonify({"ok": True})
