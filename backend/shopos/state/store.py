# Overview: The state store: holds the current tree, serialises dispatches,
# persists after every change and notifies subscribers.

from __future__ import annotations

import logging
import threading
from typing import Callable

from . import actions as A
from .actions import Action
from .bootstrap import bootstrap_state
from .persistence import StatePersistence
from .reducer import ReducerContext, reduce


logger = logging.getLogger(__name__)

Listener = Callable[[dict, Action], None]


class StateStore:
    """
    Single owner of the application state.

    `dispatch` runs reduce -> persist -> notify under a lock, so one action
    completes before the next one starts even when requests arrive on
    several threads.
    """

    def __init__(
        self,
        persistence: StatePersistence,
        context: ReducerContext | None = None,
        initial_state: dict | None = None,
    ):
        self.persistence = persistence
        self.context = context or ReducerContext()
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []
        if initial_state is None:
            initial_state = bootstrap_state(persistence, self.context.seed_factory)
        self._state = initial_state

    @property
    def state(self) -> dict:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action: Action | dict) -> dict:
        if isinstance(action, dict):
            action = Action.from_dict(action)

        with self._lock:
            previous = self._state
            next_state = reduce(previous, action, self.context)

            if action.type == A.CLEAR_ALL_DATA:
                self.persistence.clear()

            if next_state is previous:
                return next_state

            self._state = next_state
            self.persistence.save(next_state)

            for listener in list(self._listeners):
                try:
                    listener(next_state, action)
                except Exception:
                    logger.exception("State listener failed for %s", action.type)

            return next_state

    def dispatch_checked(self, action: Action, check: Callable[[dict, Action], None]) -> dict:
        """Run `check` against the current state, then dispatch, with no dispatch in between."""
        with self._lock:
            check(self._state, action)
            return self.dispatch(action)

    def dispatch_many(self, actions: list[Action | dict]) -> dict:
        with self._lock:
            for action in actions:
                self.dispatch(action)
            return self._state
