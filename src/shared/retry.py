"""Retry policies for workflow steps.

Only two kinds of failure are retried automatically:

- ``WriteConflict``: a conditional write lost a race. The decorated callable
  must be the whole logical operation (read + conditional write) so that the
  retry re-reads fresh state.
- ``StoreUnavailable`` on steps that run before any irreversible external
  effect (the charge call).
"""

import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from shared import settings
from shared.errors import PaymentGatewayUnavailable, StoreUnavailable, WriteConflict

logger = structlog.get_logger(__name__)


def _log_retry(retry_state):
    exc = retry_state.outcome.exception()
    logger.info(
        "Retrying workflow step",
        step=getattr(retry_state.fn, "__name__", "unknown"),
        attempt=retry_state.attempt_number,
        error=type(exc).__name__,
    )


def conflict_retry(attempts: int | None = None):
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts or settings.CONFLICT_RETRY_ATTEMPTS),
        wait=wait_exponential(
            multiplier=settings.CONFLICT_RETRY_MIN_WAIT,
            min=settings.CONFLICT_RETRY_MIN_WAIT,
            max=settings.CONFLICT_RETRY_MAX_WAIT,
        ),
        retry=retry_if_exception_type(WriteConflict),
        before_sleep=_log_retry,
    )


def store_retry(attempts: int | None = None):
    """Retry pre-charge store reads. Never wrap anything that charges."""
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts or settings.STORE_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=1),
        retry=retry_if_exception_type(StoreUnavailable),
        before_sleep=_log_retry,
    )


def refund_retry(attempts: int | None = None):
    """Refunds carry an idempotency key, so gateway outages are safe to retry."""
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts or settings.REFUND_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
        retry=retry_if_exception_type(PaymentGatewayUnavailable),
        before_sleep=_log_retry,
    )
