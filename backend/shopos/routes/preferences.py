from __future__ import annotations

from flask import Blueprint, jsonify, request

from ..extensions import state_store
from ..services import preferences_service
from ..validation import ValidationError

preferences_bp = Blueprint("preferences", __name__, url_prefix="/api/users")


def _known_user(state: dict, user_id: str) -> bool:
    return any(u.get("id") == user_id for u in state.get("users") or [])


@preferences_bp.route("/<user_id>/preferences", methods=["GET"])
def get_preferences(user_id: str):
    store = state_store.store
    if not _known_user(store.state, user_id):
        return jsonify({"error": "Not found"}), 404
    result = preferences_service.load_preferences(
        store.persistence.backend, user_id, store.state.get("settings") or {}
    )
    return jsonify(result)


@preferences_bp.route("/<user_id>/preferences", methods=["PUT"])
def update_preferences(user_id: str):
    store = state_store.store
    if not _known_user(store.state, user_id):
        return jsonify({"error": "Not found"}), 404
    try:
        result = preferences_service.save_preferences(
            store.persistence.backend,
            user_id,
            store.state.get("settings") or {},
            request.get_json(silent=True),
        )
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify(result)
