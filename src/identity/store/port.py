"""User store port — persistence interface for the password-reset workflow."""

from abc import ABC, abstractmethod


class UserStore(ABC):
    @abstractmethod
    def find_by_email(self, email: str):
        """Return the ``User`` with this email (case-insensitive) or ``None``."""
        ...

    @abstractmethod
    def find_by_reset_token(self, token: str):
        """Return the ``User`` currently holding ``token`` or ``None``."""
        ...

    @abstractmethod
    def set_reset_token(self, user_id: str, token: str, expiry):
        """Store a new pending reset, replacing any earlier one."""
        ...

    @abstractmethod
    def validate_password(self, password: str) -> None:
        """Apply the store's password policy.

        Raises ``StoreValidationError`` carrying the store's own message.
        """
        ...

    @abstractmethod
    def complete_password_reset(self, user_id: str, token: str, password_hash: str):
        """Set the new hash and clear the reset fields in one conditional write.

        Only applies while the user still holds ``token``; otherwise raises
        ``WriteConflict`` and changes nothing.
        """
        ...
