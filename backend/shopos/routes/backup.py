# Overview: Flask API routes for backup export, restore and full reset.

from __future__ import annotations

from flask import Blueprint, jsonify, request, current_app

from ..extensions import state_store
from ..services.dispatch_service import dispatch_validated
from ..services.state_view import backup_document, public_state
from ..state import actions as A
from ..state.actions import Action
from ..validation import ValidationError

backup_bp = Blueprint("backup", __name__, url_prefix="/api/backup")


@backup_bp.route("", methods=["GET"])
def export_backup():
    return jsonify(backup_document(state_store.store.state))


@backup_bp.route("/restore", methods=["POST"])
def restore_backup():
    """Replace business collections and settings. Users and the session are kept."""
    data = request.get_json(silent=True)
    try:
        _, state = dispatch_validated(state_store.store, {"type": A.RESTORE_BACKUP, "payload": data})
    except ValidationError as e:
        return jsonify({"error": str(e), "details": e.details}), 400
    except Exception:
        current_app.logger.exception("Backup restore failed")
        return jsonify({"error": "Failed to restore backup"}), 500
    return jsonify(public_state(state))


@backup_bp.route("/clear", methods=["POST"])
def clear_all_data():
    data = request.get_json(silent=True) or {}
    if data.get("confirm") is not True:
        return jsonify({"error": "confirm: true required"}), 400
    state = state_store.store.dispatch(Action(A.CLEAR_ALL_DATA))
    return jsonify(public_state(state))
