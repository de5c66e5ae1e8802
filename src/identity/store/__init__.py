"""User store factory."""

from identity.store.port import UserStore

_current_store: UserStore | None = None


def get_user_store() -> UserStore:
    """Return the current user store. Defaults to MemoryUserStore."""
    global _current_store
    if _current_store is None:
        from identity.store.memory_adapter import MemoryUserStore

        _current_store = MemoryUserStore()
    return _current_store


def set_user_store(store: UserStore) -> None:
    """Override the active user store (useful for tests)."""
    global _current_store
    _current_store = store


def reset_user_store() -> None:
    global _current_store
    _current_store = None
