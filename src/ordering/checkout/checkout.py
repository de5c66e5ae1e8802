"""Checkout command + handler."""

from payments.gateway import get_gateway
from protean import handle
from protean.fields import Identifier, String

from ordering.checkout.saga import CheckoutSaga
from ordering.domain import ordering
from ordering.order.order import Order
from ordering.store import get_store


@ordering.command(part_of="Order")
class Checkout:
    """Pay for everything in the user's cart.

    ``attempt_epoch`` scopes the charge idempotency key: resend the same value
    when retrying a checkout that may have gone through, bump it to try again
    after a decline.
    """

    user_id = Identifier()
    payment_token = String(max_length=255, sanitize=False)
    attempt_epoch = String(max_length=64, default="0")


@ordering.command_handler(part_of=Order)
class CheckoutHandler:
    @handle(Checkout)
    def checkout(self, command: Checkout):
        saga = CheckoutSaga(store=get_store(), gateway=get_gateway())
        return saga.run(
            user_id=command.user_id,
            payment_token=command.payment_token,
            attempt_epoch=command.attempt_epoch,
        )
