# Overview: Per-user preference overlay (theme, language, currency, time zone),
# stored as plain JSON beside the main state record.

from __future__ import annotations

import json
import logging

from ..state.persistence import StorageBackend
from ..validation import ValidationError


logger = logging.getLogger(__name__)

PREFERENCE_FIELDS = ("theme", "language", "currency", "timeZone")


def preferences_key(user_id: str) -> str:
    return f"userPrefs_{user_id}"


def default_preferences(settings: dict) -> dict:
    return {field: settings.get(field) for field in PREFERENCE_FIELDS}


def load_preferences(backend: StorageBackend, user_id: str, settings: dict) -> dict:
    """Saved preferences for the user, or the global settings when none are usable."""
    raw = backend.get(preferences_key(user_id))
    if not raw:
        return default_preferences(settings)
    try:
        saved = json.loads(raw)
    except ValueError:
        logger.error("Failed to load preferences for user %r", user_id)
        return default_preferences(settings)
    if not isinstance(saved, dict):
        return default_preferences(settings)
    return {**default_preferences(settings), **{k: v for k, v in saved.items() if k in PREFERENCE_FIELDS}}


def save_preferences(backend: StorageBackend, user_id: str, settings: dict, updates: dict) -> dict:
    if not isinstance(updates, dict):
        raise ValidationError("Invalid JSON payload")
    unknown = sorted(k for k in updates if k not in PREFERENCE_FIELDS)
    if unknown:
        raise ValidationError(f"Field not allowed: {', '.join(unknown)}")

    preferences = {**load_preferences(backend, user_id, settings), **updates}
    backend.set(preferences_key(user_id), json.dumps(preferences))
    return preferences
