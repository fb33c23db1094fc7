# Overview: Startup reconciliation of persisted state with the seed dataset.

from __future__ import annotations

import logging
from typing import Callable

from .persistence import StatePersistence
from .seed import build_seed_state


logger = logging.getLogger(__name__)


def merge_seed_users(persisted_users: list[dict], seed_users: list[dict]) -> list[dict]:
    """
    Merge users by id.

    - Persisted users keep their position.
    - A seed user also present in the persisted set gets the seed password
      and pin (seed credentials win over persisted edits).
    - Seed users missing from the persisted set are appended.
    """
    merged: dict = {u.get("id"): dict(u) for u in persisted_users}
    for seed_user in seed_users:
        existing = merged.get(seed_user.get("id"))
        if existing is not None:
            existing["password"] = seed_user.get("password")
            existing["pin"] = seed_user.get("pin")
        else:
            merged[seed_user.get("id")] = dict(seed_user)
    return list(merged.values())


def bootstrap_state(
    persistence: StatePersistence,
    seed_factory: Callable[[], dict] = build_seed_state,
) -> dict:
    """Initial state for a new store: persisted data merged with the seed, never a live session."""
    seed = seed_factory()
    persisted = persistence.load()
    if persisted is None:
        logger.info("No persisted state found; starting from seed data")
        return seed

    return {
        # Collections introduced after the blob was written start from the seed.
        **seed,
        **persisted,
        "users": merge_seed_users(persisted.get("users") or [], seed["users"]),
        "currentUser": None,
        "loginError": None,
    }
