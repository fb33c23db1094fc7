# Overview: Storage backends and the state persistence contract (load/save/clear).

from __future__ import annotations

import logging

from .codec import ObfuscationCodec


logger = logging.getLogger(__name__)

DEFAULT_STATE_KEY = "superShopAppState"

# Never written to storage: no session survives a reload.
SESSION_FIELDS = ("currentUser", "loginError")


class StorageBackend:
    """Minimal string key/value store. Implementations: memory, SQL."""

    def get(self, key: str) -> str | None:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class MemoryStorageBackend(StorageBackend):
    def __init__(self, initial: dict[str, str] | None = None):
        self.records: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.records.get(key)

    def set(self, key: str, value: str) -> None:
        self.records[key] = value

    def delete(self, key: str) -> None:
        self.records.pop(key, None)


def strip_session(state: dict) -> dict:
    return {k: v for k, v in state.items() if k not in SESSION_FIELDS}


class StatePersistence:
    """Reads and writes the whole state tree as one obfuscated record."""

    def __init__(
        self,
        backend: StorageBackend,
        codec: ObfuscationCodec | None = None,
        key: str = DEFAULT_STATE_KEY,
    ):
        self.backend = backend
        self.codec = codec or ObfuscationCodec()
        self.key = key

    def load(self) -> dict | None:
        raw = self.backend.get(self.key)
        if not raw:
            return None
        decoded = self.codec.decode(raw)
        if not isinstance(decoded, dict):
            if decoded is not None:
                logger.error("Persisted state under %r is not an object; ignoring it", self.key)
            return None
        return decoded

    def save(self, state: dict) -> bool:
        encoded = self.codec.encode(strip_session(state))
        if not encoded:
            logger.error("State not persisted: encoding produced no output")
            return False
        self.backend.set(self.key, encoded)
        return True

    def clear(self) -> None:
        self.backend.delete(self.key)
