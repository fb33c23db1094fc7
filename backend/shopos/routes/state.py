# Overview: Flask API routes for reading the state tree and dispatching actions.

# backend/shopos/routes/state.py
"""
State API

Every mutation of the shop goes through POST /api/actions as a
`{type, payload}` document. The response carries the new state with
credentials stripped.
"""

from flask import Blueprint, request, jsonify, current_app

from ..extensions import state_store
from ..services.dispatch_service import dispatch_validated
from ..services.state_view import public_state
from ..validation import ValidationError, ConflictError


state_bp = Blueprint("state", __name__, url_prefix="/api")


@state_bp.get("/state")
def get_state_route():
    return jsonify(public_state(state_store.store.state))


@state_bp.post("/actions")
def dispatch_action_route():
    """
    Dispatch one action.

    Returns:
    - 200 with {action, changed, state}
    - 400 for malformed actions or rule violations
    - 409 for conflicts (duplicate user id, second super user)
    """
    data = request.get_json(silent=True)
    store = state_store.store
    previous = store.state
    try:
        action, state = dispatch_validated(store, data)
    except ValidationError as e:
        return jsonify({"error": str(e), "details": e.details}), 400
    except ConflictError as e:
        return jsonify({"error": str(e), "details": e.details}), 409
    except Exception:
        current_app.logger.exception("Action dispatch failed")
        return jsonify({"error": "Failed to dispatch action"}), 500

    return jsonify({
        "action": action.type,
        "changed": state is not previous,
        "state": public_state(state),
    })
