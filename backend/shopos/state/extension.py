# Overview: Flask extension exposing one StateStore per application.

from __future__ import annotations

import threading
from typing import Callable

from flask import Flask, current_app

from .codec import ObfuscationCodec
from .persistence import StatePersistence
from .store import StateStore


PersistenceFactory = Callable[[Flask], StatePersistence]

_EXTENSION_KEY = "shopos_state"


def sql_persistence_factory(app: Flask) -> StatePersistence:
    from ..services.storage_service import SqlStorageBackend

    return StatePersistence(
        backend=SqlStorageBackend(),
        codec=ObfuscationCodec(app.config["STATE_OBFUSCATION_KEY"]),
        key=app.config["STATE_STORAGE_KEY"],
    )


class StateStoreExtension:
    """
    Builds the store lazily on first use, inside an app context, so the
    bootstrap can read the storage table.
    """

    def __init__(self, app: Flask | None = None, persistence_factory: PersistenceFactory | None = None):
        if app is not None:
            self.init_app(app, persistence_factory)

    def init_app(self, app: Flask, persistence_factory: PersistenceFactory | None = None) -> None:
        app.extensions[_EXTENSION_KEY] = {
            "factory": persistence_factory or sql_persistence_factory,
            "store": None,
            "lock": threading.Lock(),
        }

    @staticmethod
    def _slot(app: Flask) -> dict:
        try:
            return app.extensions[_EXTENSION_KEY]
        except KeyError:
            raise RuntimeError("StateStoreExtension is not initialised on this app") from None

    def get_store(self, app: Flask | None = None) -> StateStore:
        app = app or current_app._get_current_object()
        slot = self._slot(app)
        if slot["store"] is None:
            with slot["lock"]:
                if slot["store"] is None:
                    slot["store"] = StateStore(slot["factory"](app))
        return slot["store"]

    @property
    def store(self) -> StateStore:
        return self.get_store()

    def reset(self, app: Flask | None = None) -> None:
        """Drop the store; the next access bootstraps again from storage."""
        app = app or current_app._get_current_object()
        slot = self._slot(app)
        with slot["lock"]:
            slot["store"] = None
