"""Add to cart — idempotent upsert of a (user, item) cart row.

The upsert is read + conditional write, retried as a whole when the write
loses a race:

    found     -> compare-and-swap quantity from q to q + 1
    not found -> create-if-absent with quantity 1

Two concurrent first adds can both observe "not found"; the loser's create
raises WriteConflict, the retry finds the winner's row and increments it.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from shared.errors import NotFound, Unauthenticated
from shared.retry import conflict_retry

from ordering.cart.cart_item import CartItem
from ordering.domain import ordering
from ordering.store import get_store

logger = structlog.get_logger(__name__)


@ordering.command(part_of="CartItem")
class AddToCart:
    user_id = Identifier()
    item_id = Identifier(required=True)


def add_item_to_cart(store, user_id, item_id) -> CartItem:
    """Ensure a CartItem exists for the pair, incrementing it if it does."""
    if not user_id:
        raise Unauthenticated()

    if store.find_item(item_id) is None:
        raise NotFound(f"No item found for {item_id}")

    cart_item = _upsert(store, user_id, item_id)
    logger.info(
        "Cart item upserted",
        user_id=user_id,
        item_id=item_id,
        cart_item_id=cart_item.id,
        quantity=cart_item.quantity,
    )
    return cart_item


@conflict_retry()
def _upsert(store, user_id, item_id) -> CartItem:
    existing = store.find_cart_item(user_id, item_id)
    if existing is not None:
        return store.update_cart_item_quantity(
            existing.id,
            expected_quantity=existing.quantity,
            quantity=existing.quantity + 1,
        )
    return store.create_cart_item(user_id, item_id, quantity=1)


@ordering.command_handler(part_of=CartItem)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        return add_item_to_cart(get_store(), command.user_id, command.item_id)
