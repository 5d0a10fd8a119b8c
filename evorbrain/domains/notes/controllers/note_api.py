"""Note API controllers."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from evorbrain.core.utils.requests import parse_body, parse_query
from evorbrain.domains.notes.mappers import map_note
from evorbrain.domains.notes.schemas.note_schemas import NoteCreate, NoteListFilter, NoteSearch, NoteUpdate
from evorbrain.domains.notes.services import note_service as services

note_api_bp = Blueprint("note_api", __name__)


@note_api_bp.get("")
def list_notes():
    params = parse_query(NoteListFilter)
    items = services.list_notes(**params.model_dump())
    return jsonify({"ok": True, "items": [map_note(n) for n in items], "total": len(items)})


@note_api_bp.get("/search")
def search_notes():
    params = parse_query(NoteSearch)
    limit = min(params.limit, current_app.config.get("NOTE_SEARCH_LIMIT", services.DEFAULT_SEARCH_LIMIT))
    items = services.search_notes(params.q, limit=limit)
    return jsonify({"ok": True, "items": [map_note(n) for n in items], "total": len(items)})


@note_api_bp.post("")
def create_note():
    data = parse_body(NoteCreate)
    note = services.create_note(**data.model_dump())
    return jsonify({"ok": True, "note": map_note(note)}), 201


@note_api_bp.get("/<note_id>")
def get_note(note_id: str):
    return jsonify({"ok": True, "note": map_note(services.get_note(note_id))})


@note_api_bp.patch("/<note_id>")
def update_note(note_id: str):
    data = parse_body(NoteUpdate)
    note = services.update_note(note_id, **data.model_dump(exclude_unset=True))
    return jsonify({"ok": True, "note": map_note(note)})


@note_api_bp.post("/<note_id>/archive")
def archive_note(note_id: str):
    summary = services.archive_note(note_id)
    return jsonify({"ok": True, "archive": summary.to_dict()})


@note_api_bp.post("/<note_id>/restore")
def restore_note(note_id: str):
    return jsonify({"ok": True, "note": map_note(services.restore_note(note_id))})


@note_api_bp.delete("/<note_id>")
def delete_note(note_id: str):
    services.delete_note(note_id)
    return jsonify({"ok": True})
