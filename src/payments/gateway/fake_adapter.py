"""Configurable fake payment gateway for development and testing.

Simulates a gateway without external calls. It honours idempotency keys the
way real gateways do (a repeated key replays the stored result) and can be
configured at runtime to decline, to be unavailable, or to return fixed
charge ids for predictable tests.
"""

import threading
from uuid import uuid4

from shared.errors import PaymentGatewayUnavailable

from payments.gateway.port import ChargeResult, PaymentGateway, RefundResult


class FakeGateway(PaymentGateway):
    """Configurable fake payment gateway."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Card declined"
        self.unavailable: bool = False
        self.refunds_unavailable: bool = False
        self.calls: list[dict] = []
        self.charges: dict[str, ChargeResult] = {}
        self.refunds: dict[str, RefundResult] = {}
        self._next_charge_ids: list[str] = []
        self._results_by_key: dict[str, ChargeResult | RefundResult] = {}
        self._lock = threading.Lock()

    def configure(
        self,
        should_succeed: bool = True,
        failure_reason: str = "Card declined",
        unavailable: bool = False,
        refunds_unavailable: bool = False,
    ) -> None:
        """Configure gateway behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.unavailable = unavailable
        self.refunds_unavailable = refunds_unavailable

    def queue_charge_ids(self, *charge_ids: str) -> None:
        """Use these ids, in order, for the next successful charges."""
        self._next_charge_ids.extend(charge_ids)

    def create_charge(
        self,
        amount: int,
        currency: str,
        token: str,
        idempotency_key: str,
    ) -> ChargeResult:
        with self._lock:
            self.calls.append(
                {
                    "method": "create_charge",
                    "amount": amount,
                    "currency": currency,
                    "token": token,
                    "idempotency_key": idempotency_key,
                }
            )

            if self.unavailable:
                raise PaymentGatewayUnavailable(detail="Fake gateway configured as unavailable")

            if idempotency_key in self._results_by_key:
                return self._results_by_key[idempotency_key]

            if self.should_succeed:
                charge_id = self._next_charge_ids.pop(0) if self._next_charge_ids else f"ch_{uuid4().hex[:14]}"
                result = ChargeResult(
                    success=True,
                    charge_id=charge_id,
                    amount=amount,
                    currency=currency,
                    gateway_status="succeeded",
                )
                self.charges[charge_id] = result
            else:
                result = ChargeResult(
                    success=False,
                    gateway_status="failed",
                    failure_reason=self.failure_reason,
                )

            self._results_by_key[idempotency_key] = result
            return result

    def create_refund(
        self,
        charge_id: str,
        amount: int,
        reason: str,
        idempotency_key: str,
    ) -> RefundResult:
        with self._lock:
            self.calls.append(
                {
                    "method": "create_refund",
                    "charge_id": charge_id,
                    "amount": amount,
                    "reason": reason,
                    "idempotency_key": idempotency_key,
                }
            )

            if self.refunds_unavailable:
                raise PaymentGatewayUnavailable(detail="Fake gateway refunds configured as unavailable")

            if idempotency_key in self._results_by_key:
                return self._results_by_key[idempotency_key]

            if charge_id not in self.charges:
                result = RefundResult(success=False, charge_id=charge_id, failure_reason="No such charge")
            else:
                result = RefundResult(
                    success=True,
                    refund_id=f"re_{uuid4().hex[:14]}",
                    charge_id=charge_id,
                    amount=amount,
                    gateway_status="succeeded",
                )
                self.refunds[charge_id] = result

            self._results_by_key[idempotency_key] = result
            return result

    def charge_calls(self) -> list[dict]:
        return [c for c in self.calls if c["method"] == "create_charge"]
