"""Failure taxonomy shared by every storefront workflow.

Each workflow either returns its success payload or raises one of the
``StorefrontError`` subclasses below. ``message`` is always safe to show to an
unauthenticated caller: raw store or gateway text is kept in ``detail`` for
logging and never copied into ``message``.
"""

from enum import Enum


class ErrorCategory(str, Enum):
    AUTHENTICATION = "authentication"
    NOT_FOUND = "not_found"
    BUSINESS_RULE = "business_rule"
    PAYMENT = "payment"
    CONFLICT = "conflict"
    UNAVAILABLE = "unavailable"
    VALIDATION = "validation"


class StorefrontError(Exception):
    """Base class for typed workflow failures."""

    code = "storefront_error"
    category = ErrorCategory.BUSINESS_RULE
    default_message = "The request could not be completed"
    retryable = False

    def __init__(self, message: str | None = None, detail: str | None = None):
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Response envelope for a delivery layer."""
        return {
            "error": {
                "code": self.code,
                "category": self.category.value,
                "message": self.message,
                "retryable": self.retryable,
            }
        }


class Unauthenticated(StorefrontError):
    code = "unauthenticated"
    category = ErrorCategory.AUTHENTICATION
    default_message = "You must be signed in to do that"


class NotFound(StorefrontError):
    code = "not_found"
    category = ErrorCategory.NOT_FOUND
    default_message = "The requested resource does not exist"


class EmptyCart(StorefrontError):
    code = "empty_cart"
    default_message = "Your cart is empty"


class PaymentDeclined(StorefrontError):
    code = "payment_declined"
    category = ErrorCategory.PAYMENT
    default_message = "Your payment was declined"


class PaymentGatewayUnavailable(StorefrontError):
    code = "payment_gateway_unavailable"
    category = ErrorCategory.UNAVAILABLE
    default_message = "Payments are temporarily unavailable, please try again"
    retryable = True


class StoreUnavailable(StorefrontError):
    code = "store_unavailable"
    category = ErrorCategory.UNAVAILABLE
    default_message = "The service is temporarily unavailable, please try again"
    retryable = True


class WriteConflict(StorefrontError):
    """A conditional write lost a race; the whole operation may be retried."""

    code = "write_conflict"
    category = ErrorCategory.CONFLICT
    default_message = "The request conflicted with a concurrent change, please try again"
    retryable = True


class InvalidToken(StorefrontError):
    code = "invalid_token"
    category = ErrorCategory.VALIDATION
    default_message = "This reset token is invalid"


class TokenExpired(StorefrontError):
    code = "token_expired"
    category = ErrorCategory.VALIDATION
    default_message = "This reset token has expired"


class PasswordMismatch(StorefrontError):
    code = "password_mismatch"
    category = ErrorCategory.VALIDATION
    default_message = "Passwords do not match"


class PolicyViolation(StorefrontError):
    code = "policy_violation"
    category = ErrorCategory.VALIDATION
    default_message = "The new password does not meet the password policy"


class StoreValidationError(Exception):
    """Raised by store adapters when a write is rejected by a store-side rule.

    Internal only: workflows translate it into a caller-facing error and log
    ``detail`` instead of forwarding it.
    """

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)
