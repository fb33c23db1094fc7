# Overview: Boundary between external callers (HTTP, CLI) and the store.

"""
Validated dispatch

External callers never hand raw documents to the store. They go through
`dispatch_validated`, which checks the payload shape and the business rules
the reducer deliberately does not enforce (due limits, user id uniqueness,
password policy, single super_user), then dispatches.
"""

from __future__ import annotations

from ..state import actions as A
from ..state.actions import Action
from ..state.store import StateStore
from ..validation import parse_action, enforce_rules_user, validate_password
from .dues_service import validate_due_collection


def enforce_action_rules(state: dict, action: Action) -> None:
    payload = action.payload

    if action.type == A.ADD_USER:
        enforce_rules_user(state, payload)
    elif action.type == A.EDIT_USER:
        original_id = payload["originalId"]
        updated = payload["updatedUser"]
        enforce_rules_user(state, {**updated, "id": updated.get("id") or original_id}, original_id=original_id)
    elif action.type == A.RESET_USER_PASSWORD:
        validate_password(payload["newPassword"])
    elif action.type == A.COLLECT_DUE:
        validate_due_collection(state, payload["customerId"], payload["amount"])


def dispatch_validated(store: StateStore, data) -> tuple[Action, dict]:
    """Parse, check and dispatch one action document. Returns the action and the new state."""
    if isinstance(data, Action):
        data = data.to_dict()
    action = parse_action(data)
    return action, store.dispatch_checked(action, enforce_action_rules)
