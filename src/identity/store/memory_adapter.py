"""In-memory user store with the same conditional-write guarantees as a real one."""

import threading
from uuid import uuid4

from shared import settings
from shared.errors import StoreUnavailable, StoreValidationError, WriteConflict

from identity.store.port import UserStore
from identity.user.user import User


class MemoryUserStore(UserStore):
    def __init__(self, min_password_length: int | None = None):
        self._lock = threading.RLock()
        self._users: dict[str, dict] = {}
        self._failures: set[str] = set()
        self.min_password_length = min_password_length or settings.MIN_PASSWORD_LENGTH
        self.writes: list[tuple[str, str]] = []

    def add_user(self, email, password_hash=None, id=None) -> User:
        row = {
            "id": id or str(uuid4()),
            "email": email.strip().lower(),
            "password_hash": password_hash,
            "reset_token": None,
            "reset_token_expiry": None,
        }
        with self._lock:
            self._users[row["id"]] = row
        return User(**row)

    def get(self, user_id) -> User | None:
        with self._lock:
            row = self._users.get(user_id)
            return User(**row) if row else None

    def fail_on(self, operation: str):
        with self._lock:
            self._failures.add(operation)

    def _check(self, operation):
        if operation in self._failures:
            raise StoreUnavailable(detail=f"memory store: injected failure on {operation}")

    def find_by_email(self, email):
        email = (email or "").strip().lower()
        with self._lock:
            self._check("find_by_email")
            for row in self._users.values():
                if row["email"] == email:
                    return User(**row)
        return None

    def find_by_reset_token(self, token):
        if not token:
            return None
        with self._lock:
            self._check("find_by_reset_token")
            for row in self._users.values():
                if row["reset_token"] == token:
                    return User(**row)
        return None

    def set_reset_token(self, user_id, token, expiry):
        with self._lock:
            self._check("set_reset_token")
            row = self._users[user_id]
            user = User(**row)
            user.issue_reset_token(token, expiry)
            row["reset_token"] = user.reset_token
            row["reset_token_expiry"] = user.reset_token_expiry
            self.writes.append(("set_reset_token", user_id))
            return user

    def validate_password(self, password):
        if not password or len(password) < self.min_password_length:
            raise StoreValidationError(
                f"[password:minLength:User:password] Value must be at least "
                f"{self.min_password_length} characters long."
            )

    def complete_password_reset(self, user_id, token, password_hash):
        with self._lock:
            self._check("complete_password_reset")
            row = self._users.get(user_id)
            if row is None or not token or row["reset_token"] != token:
                raise WriteConflict(detail=f"reset token for user {user_id} changed since it was read")
            user = User(**row)
            user.complete_reset(password_hash)
            row["password_hash"] = user.password_hash
            row["reset_token"] = None
            row["reset_token_expiry"] = None
            self.writes.append(("complete_password_reset", user_id))
            return user
