"""Life area API controllers."""

from __future__ import annotations

from flask import Blueprint, jsonify

from evorbrain.core.hierarchy.schemas import RestoreRequest
from evorbrain.core.utils.requests import parse_body, parse_query
from evorbrain.domains.life_areas.mappers import map_life_area
from evorbrain.domains.life_areas.schemas.life_area_schemas import (
    LifeAreaCreate,
    LifeAreaListFilter,
    LifeAreaUpdate,
    ReorderRequest,
)
from evorbrain.domains.life_areas.services import life_area_service as services

life_area_api_bp = Blueprint("life_area_api", __name__)


@life_area_api_bp.get("")
def list_life_areas():
    params = parse_query(LifeAreaListFilter)
    items = services.list_life_areas(include_archived=params.include_archived)
    return jsonify({"ok": True, "items": [map_life_area(a) for a in items], "total": len(items)})


@life_area_api_bp.post("")
def create_life_area():
    data = parse_body(LifeAreaCreate)
    life_area = services.create_life_area(**data.model_dump())
    return jsonify({"ok": True, "life_area": map_life_area(life_area)}), 201


@life_area_api_bp.get("/<life_area_id>")
def get_life_area(life_area_id: str):
    return jsonify({"ok": True, "life_area": map_life_area(services.get_life_area(life_area_id))})


@life_area_api_bp.patch("/<life_area_id>")
def update_life_area(life_area_id: str):
    data = parse_body(LifeAreaUpdate)
    life_area = services.update_life_area(life_area_id, **data.model_dump(exclude_unset=True))
    return jsonify({"ok": True, "life_area": map_life_area(life_area)})


@life_area_api_bp.post("/reorder")
def reorder_life_areas():
    data = parse_body(ReorderRequest)
    items = services.reorder_life_areas(data.ids)
    return jsonify({"ok": True, "items": [map_life_area(a) for a in items]})


@life_area_api_bp.post("/<life_area_id>/archive")
def archive_life_area(life_area_id: str):
    summary = services.archive_life_area(life_area_id)
    return jsonify({"ok": True, "archive": summary.to_dict()})


@life_area_api_bp.post("/<life_area_id>/restore")
def restore_life_area(life_area_id: str):
    data = parse_body(RestoreRequest)
    life_area = services.restore_life_area(life_area_id, cascade=data.cascade)
    return jsonify({"ok": True, "life_area": map_life_area(life_area)})


@life_area_api_bp.delete("/<life_area_id>")
def delete_life_area(life_area_id: str):
    services.delete_life_area(life_area_id)
    return jsonify({"ok": True})
