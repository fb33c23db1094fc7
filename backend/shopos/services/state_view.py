# Overview: Outbound views of the state tree for API responses.

from __future__ import annotations

from ..state.persistence import strip_session
from ..state.reducer import BACKUP_OPTIONAL_COLLECTIONS, BACKUP_REQUIRED_COLLECTIONS


CREDENTIAL_FIELDS = ("password", "pin")


def public_user(user: dict | None) -> dict | None:
    if user is None:
        return None
    return {k: v for k, v in user.items() if k not in CREDENTIAL_FIELDS}


def public_state(state: dict) -> dict:
    """The state tree without the session, and without credentials on any user."""
    return {
        **strip_session(state),
        "users": [public_user(u) for u in state.get("users") or []],
    }


def session_view(state: dict) -> dict:
    return {
        "currentUser": public_user(state.get("currentUser")),
        "loginError": state.get("loginError"),
    }


def backup_document(state: dict) -> dict:
    """Everything RESTORE_BACKUP accepts: no users, no session, no notifications."""
    document = {key: state.get(key) or [] for key in BACKUP_REQUIRED_COLLECTIONS + BACKUP_OPTIONAL_COLLECTIONS}
    document["settings"] = state.get("settings")
    return document
