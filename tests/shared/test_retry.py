import pytest
from shared.errors import PaymentGatewayUnavailable, StoreUnavailable, WriteConflict
from shared.retry import conflict_retry, refund_retry, store_retry


def _flaky(error_cls, failures):
    calls = []

    def operation():
        calls.append(1)
        if len(calls) <= failures:
            raise error_cls(detail="flaky")
        return len(calls)

    return operation, calls


class TestConflictRetry:
    def test_retries_until_success(self):
        operation, calls = _flaky(WriteConflict, failures=2)
        assert conflict_retry(attempts=5)(operation)() == 3

    def test_gives_up_and_reraises(self):
        operation, calls = _flaky(WriteConflict, failures=10)
        with pytest.raises(WriteConflict):
            conflict_retry(attempts=3)(operation)()
        assert len(calls) == 3

    def test_other_errors_are_not_retried(self):
        operation, calls = _flaky(StoreUnavailable, failures=1)
        with pytest.raises(StoreUnavailable):
            conflict_retry(attempts=3)(operation)()
        assert len(calls) == 1


class TestStoreRetry:
    def test_retries_store_outage(self):
        operation, calls = _flaky(StoreUnavailable, failures=1)
        assert store_retry(attempts=2)(operation)() == 2

    def test_conflicts_are_not_retried(self):
        operation, calls = _flaky(WriteConflict, failures=1)
        with pytest.raises(WriteConflict):
            store_retry(attempts=3)(operation)()
        assert len(calls) == 1


class TestRefundRetry:
    def test_retries_gateway_outage(self):
        operation, calls = _flaky(PaymentGatewayUnavailable, failures=1)
        assert refund_retry(attempts=2)(operation)() == 2
