"""Checkout saga — turns a user's cart into a paid Order.

Steps, in order:
    1. Take the per-user checkout lease, load the cart snapshot
    2. Compute the amount from the snapshot
    3. Charge the payment token once, with an idempotency key
    4. Create the Order from the snapshot and the charge
    5. Delete exactly the snapshot's cart rows
    6. Return the Order

Only steps 1-2 are retried on store outages; nothing before the charge has an
external effect. Once the charge is requested the remaining steps always run
to completion:

    step 4 fails -> refund the charge, then re-raise the original failure
    step 5 fails -> keep the order, record a PendingCartCleanup
"""

from uuid import uuid4

import structlog
from shared import settings
from shared.errors import (
    EmptyCart,
    PaymentDeclined,
    PaymentGatewayUnavailable,
    StoreUnavailable,
    Unauthenticated,
    WriteConflict,
)
from shared.retry import conflict_retry, refund_retry, store_retry

from ordering.checkout.snapshot import CartSnapshot
from ordering.order.order import Order

logger = structlog.get_logger(__name__)


class CheckoutSaga:
    def __init__(self, store, gateway, currency: str | None = None, lease_seconds: int | None = None):
        self.store = store
        self.gateway = gateway
        self.currency = currency or settings.CURRENCY
        self.lease_seconds = lease_seconds or settings.CHECKOUT_LEASE_SECONDS

    def run(self, user_id, payment_token, attempt_epoch="0") -> Order:
        if not user_id:
            raise Unauthenticated()

        owner = uuid4().hex
        self._acquire_lease(user_id, owner)
        try:
            snapshot = self._load_snapshot(user_id)
            if not snapshot.lines:
                raise EmptyCart()

            charge = self._charge(snapshot, payment_token, attempt_epoch)
            order = self._materialize(snapshot, charge)
            self._clear_cart(snapshot, order)
        finally:
            self._release_lease(user_id, owner)

        logger.info(
            "Checkout completed",
            user_id=user_id,
            order_id=order.id,
            charge_id=order.charge_id,
            total=order.total,
        )
        return order

    # Step 1: lease and snapshot

    @conflict_retry()
    @store_retry()
    def _acquire_lease(self, user_id, owner):
        if not self.store.acquire_checkout_lease(user_id, owner, self.lease_seconds):
            raise WriteConflict(detail=f"checkout already in progress for user {user_id}")

    @store_retry()
    def _load_snapshot(self, user_id) -> CartSnapshot:
        return CartSnapshot(user_id=user_id, lines=tuple(self.store.load_cart(user_id)))

    def _release_lease(self, user_id, owner):
        try:
            self.store.release_checkout_lease(user_id, owner)
        except StoreUnavailable as exc:
            # The lease expires on its own after lease_seconds
            logger.warning("Could not release checkout lease", user_id=user_id, error=exc.detail)

    # Step 3: charge

    def _charge(self, snapshot: CartSnapshot, payment_token, attempt_epoch):
        amount = snapshot.amount()
        idempotency_key = snapshot.idempotency_key(attempt_epoch or "0")
        logger.info(
            "Charging cart",
            user_id=snapshot.user_id,
            amount=amount,
            currency=self.currency,
            lines=len(snapshot.lines),
        )

        try:
            charge = self.gateway.create_charge(
                amount=amount,
                currency=self.currency,
                token=payment_token,
                idempotency_key=idempotency_key,
            )
        except PaymentGatewayUnavailable as exc:
            logger.error("Payment gateway unavailable", user_id=snapshot.user_id, error=exc.detail)
            raise

        if not charge.success:
            logger.info(
                "Payment declined",
                user_id=snapshot.user_id,
                reason=charge.failure_reason,
            )
            raise PaymentDeclined(detail=charge.failure_reason)

        return charge

    # Step 4: order, with refund as compensation

    def _materialize(self, snapshot: CartSnapshot, charge) -> Order:
        try:
            existing = self.store.find_order_by_charge(charge.charge_id)
            if existing is not None:
                logger.info("Order already exists for charge", charge_id=charge.charge_id, order_id=existing.id)
                return existing

            order = Order.place(
                user_id=snapshot.user_id,
                lines=snapshot.lines,
                charge_id=charge.charge_id,
                charged_amount=charge.amount,
                currency=charge.currency or self.currency,
            )
            try:
                return self.store.create_order(order)
            except WriteConflict:
                existing = self.store.find_order_by_charge(charge.charge_id)
                if existing is None:
                    raise
                return existing
        except Exception as exc:
            logger.error(
                "Order creation failed after charge",
                user_id=snapshot.user_id,
                charge_id=charge.charge_id,
                error=getattr(exc, "detail", None) or str(exc),
            )
            self._compensate(charge)
            raise

    def _compensate(self, charge):
        try:
            refund = self._refund(charge)
        except PaymentGatewayUnavailable as exc:
            logger.critical(
                "Refund failed, charge needs manual reconciliation",
                charge_id=charge.charge_id,
                amount=charge.amount,
                error=exc.detail,
            )
            return

        if not refund.success:
            logger.critical(
                "Refund rejected, charge needs manual reconciliation",
                charge_id=charge.charge_id,
                amount=charge.amount,
                reason=refund.failure_reason,
            )
            return

        logger.warning(
            "Charge refunded after failed checkout",
            charge_id=charge.charge_id,
            refund_id=refund.refund_id,
            amount=charge.amount,
        )

    @refund_retry()
    def _refund(self, charge):
        return self.gateway.create_refund(
            charge_id=charge.charge_id,
            amount=charge.amount,
            reason="order_creation_failed",
            idempotency_key=f"refund-{charge.charge_id}",
        )

    # Step 5: clear the snapshot's cart rows

    def _clear_cart(self, snapshot: CartSnapshot, order: Order):
        cart_item_ids = snapshot.cart_item_ids()
        try:
            self.store.delete_cart_items(cart_item_ids)
            return
        except StoreUnavailable as exc:
            logger.error(
                "Cart clear failed after order was placed",
                user_id=snapshot.user_id,
                order_id=order.id,
                error=exc.detail,
            )

        try:
            self.store.record_pending_cleanup(snapshot.user_id, order.id, cart_item_ids)
        except StoreUnavailable as exc:
            logger.critical(
                "Could not record pending cart cleanup",
                user_id=snapshot.user_id,
                order_id=order.id,
                cart_item_ids=cart_item_ids,
                error=exc.detail,
            )
