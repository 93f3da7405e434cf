"""Persistence for session state."""

from queueseg.storage.state_store import (
    JsonStateStore,
    MemoryStateStore,
    StateStore,
    StateStoreError,
)

__all__ = [
    "JsonStateStore",
    "MemoryStateStore",
    "StateStore",
    "StateStoreError",
]
