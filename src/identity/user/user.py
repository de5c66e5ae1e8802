"""User aggregate — credentials and the pending password reset, if any.

A user holds at most one pending reset. Issuing a new token replaces the old
one; consuming a token clears both reset fields together.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from identity.domain import identity


@identity.aggregate
class User:
    email: String(required=True, max_length=254)
    password_hash: String(max_length=255)
    reset_token: String(max_length=64)
    reset_token_expiry: DateTime()

    @invariant.post
    def reset_fields_set_together(self):
        if (self.reset_token is None) != (self.reset_token_expiry is None):
            raise ValidationError(
                {"reset_token": ["Reset token and expiry must be set or cleared together"]}
            )

    def issue_reset_token(self, token, expiry):
        with atomic_change(self):
            self.reset_token = token
            self.reset_token_expiry = expiry

    def complete_reset(self, password_hash):
        with atomic_change(self):
            self.password_hash = password_hash
            self.reset_token = None
            self.reset_token_expiry = None

    def reset_token_expired(self, now=None) -> bool:
        """A token is usable up to and including its expiry instant."""
        if self.reset_token_expiry is None:
            return True
        now = now or datetime.now(UTC)
        expiry = self.reset_token_expiry
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=UTC)
        return now > expiry
