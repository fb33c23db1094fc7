# Overview: State engine package.
# Re-exports the reducer, store, codec and persistence APIs.

from .actions import Action, ACTION_TYPES
from .codec import ObfuscationCodec
from .persistence import StatePersistence, StorageBackend, MemoryStorageBackend
from .reducer import ReducerContext, reduce
from .bootstrap import bootstrap_state, merge_seed_users
from .seed import build_seed_state
from .store import StateStore

__all__ = [
    "Action",
    "ACTION_TYPES",
    "ObfuscationCodec",
    "StatePersistence",
    "StorageBackend",
    "MemoryStorageBackend",
    "ReducerContext",
    "reduce",
    "bootstrap_state",
    "merge_seed_users",
    "build_seed_state",
    "StateStore",
]
