import pytest
from shared.errors import (
    EmptyCart,
    ErrorCategory,
    InvalidToken,
    NotFound,
    PasswordMismatch,
    PaymentDeclined,
    PaymentGatewayUnavailable,
    PolicyViolation,
    StorefrontError,
    StoreUnavailable,
    StoreValidationError,
    TokenExpired,
    Unauthenticated,
    WriteConflict,
)

ALL_ERRORS = [
    Unauthenticated,
    NotFound,
    EmptyCart,
    PaymentDeclined,
    PaymentGatewayUnavailable,
    StoreUnavailable,
    WriteConflict,
    InvalidToken,
    TokenExpired,
    PasswordMismatch,
    PolicyViolation,
]


class TestErrorTaxonomy:
    @pytest.mark.parametrize("error_cls", ALL_ERRORS)
    def test_every_error_is_a_storefront_error(self, error_cls):
        assert issubclass(error_cls, StorefrontError)

    def test_codes_are_unique(self):
        codes = [error_cls.code for error_cls in ALL_ERRORS]
        assert len(codes) == len(set(codes))

    def test_default_message(self):
        assert EmptyCart().message == "Your cart is empty"

    def test_detail_is_kept_out_of_message(self):
        error = PaymentDeclined(detail="card_declined: insufficient_funds")
        assert "insufficient" not in error.message
        assert error.detail == "card_declined: insufficient_funds"

    def test_to_dict(self):
        assert WriteConflict().to_dict()["error"] == {
            "code": "write_conflict",
            "category": ErrorCategory.CONFLICT.value,
            "message": WriteConflict.default_message,
            "retryable": True,
        }

    def test_retryable_errors(self):
        retryable = {error_cls for error_cls in ALL_ERRORS if error_cls.retryable}
        assert retryable == {PaymentGatewayUnavailable, StoreUnavailable, WriteConflict}

    def test_store_validation_error_is_internal(self):
        error = StoreValidationError("[password:minLength] too short")
        assert not isinstance(error, StorefrontError)
        assert error.detail == "[password:minLength] too short"
