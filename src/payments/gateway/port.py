"""Payment gateway port (abstract interface).

Defines the contract every payment gateway adapter implements, so the
checkout saga never depends on a concrete provider. Amounts are integers in
minor currency units.

Declines are reported in the result (``success=False``); transient outages
are raised as ``shared.errors.PaymentGatewayUnavailable``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ChargeResult:
    """Result of a charge attempt."""

    success: bool
    charge_id: str | None = None
    amount: int | None = None
    currency: str | None = None
    gateway_status: str | None = None
    failure_reason: str | None = None


@dataclass(frozen=True)
class RefundResult:
    """Result of a refund attempt."""

    success: bool
    refund_id: str | None = None
    charge_id: str | None = None
    amount: int | None = None
    gateway_status: str | None = None
    failure_reason: str | None = None


class PaymentGateway(ABC):
    """Abstract payment gateway interface."""

    @abstractmethod
    def create_charge(
        self,
        amount: int,
        currency: str,
        token: str,
        idempotency_key: str,
    ) -> ChargeResult:
        """Exchange a payment token for a charge.

        Repeating a call with the same ``idempotency_key`` must return the
        original result instead of charging again.
        """
        ...

    @abstractmethod
    def create_refund(
        self,
        charge_id: str,
        amount: int,
        reason: str,
        idempotency_key: str,
    ) -> RefundResult:
        """Refund a previous charge, idempotent on ``idempotency_key``."""
        ...
