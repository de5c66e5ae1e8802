"""Ordering store factory.

A single store object implements both ``CartStore`` and ``OrderStore``.
Production backends are plugged in with set_store(); the in-memory store is
the default.
"""

from ordering.store.port import CartStore

_current_store: CartStore | None = None


def get_store():
    """Return the current ordering store. Defaults to MemoryOrderingStore."""
    global _current_store
    if _current_store is None:
        from ordering.store.memory_adapter import MemoryOrderingStore

        _current_store = MemoryOrderingStore()
    return _current_store


def set_store(store) -> None:
    """Override the active ordering store (useful for tests)."""
    global _current_store
    _current_store = store


def reset_store() -> None:
    global _current_store
    _current_store = None
