# Overview: Flask API routes for the terminal session (login, PIN login, logout).

# backend/shopos/routes/auth.py
"""
Authentication API routes

The shop runs one terminal session: the signed-in user lives in the state
tree as `currentUser` and is never persisted, so a restart always lands on
the login screen.
"""

from flask import Blueprint, request, jsonify, current_app

from ..extensions import state_store
from ..services.state_view import session_view
from ..state import actions as A
from ..state.actions import Action


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def _session_response(state):
    body = session_view(state)
    if body["currentUser"] is None:
        return jsonify({**body, "error": body["loginError"] or A.LOGIN_ERROR_INVALID_CREDENTIALS}), 401
    return jsonify(body)


@auth_bp.post("/login")
def login_route():
    """
    Sign in with user id (case-insensitive) and password.

    Returns the session on success, 401 with the login error otherwise.
    """
    data = request.get_json(silent=True) or {}
    user_id = data.get("userId") or data.get("username")
    password = data.get("password")
    if not all([user_id, password]):
        return jsonify({"error": "userId and password required"}), 400

    try:
        state = state_store.store.dispatch(Action(A.LOGIN_WITH_PASSWORD, {"userId": user_id, "password": password}))
    except Exception:
        current_app.logger.exception("Login failed")
        return jsonify({"error": "Login failed"}), 500
    return _session_response(state)


@auth_bp.post("/login-pin")
def login_pin_route():
    data = request.get_json(silent=True) or {}
    user_id = data.get("userId")
    if not user_id:
        return jsonify({"error": "userId required"}), 400

    try:
        state = state_store.store.dispatch(Action(A.LOGIN_WITH_PIN, {"userId": user_id}))
    except Exception:
        current_app.logger.exception("PIN login failed")
        return jsonify({"error": "Login failed"}), 500
    return _session_response(state)


@auth_bp.post("/logout")
def logout_route():
    state = state_store.store.dispatch(Action(A.LOGOUT_USER))
    return jsonify(session_view(state))


@auth_bp.get("/session")
def session_route():
    return jsonify(session_view(state_store.store.state))
