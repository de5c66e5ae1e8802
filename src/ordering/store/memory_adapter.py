"""In-memory ordering store.

Rows are plain dicts guarded by a single re-entrant lock; every
check-and-write happens under that lock, which is what makes the
conditional writes atomic. Items and cart rows are rebuilt from their dicts
on every read. Orders are write-once, so the placed Order is kept and handed
back as is.
"""

import itertools
import threading
import time
from uuid import uuid4

import structlog
from shared.errors import StoreUnavailable, WriteConflict

from ordering.cart.cart_item import CartItem
from ordering.catalogue.item import Item
from ordering.store.port import CartLine, CartStore, OrderStore, PendingCartCleanup

logger = structlog.get_logger(__name__)


class MemoryOrderingStore(CartStore, OrderStore):
    def __init__(self, clock=time.monotonic):
        self._lock = threading.RLock()
        self._clock = clock
        self._items: dict[str, dict] = {}
        self._cart_items: dict[str, dict] = {}
        self._cart_index: dict[tuple[str, str], str] = {}
        self._leases: dict[str, tuple[str, float]] = {}
        self._cleanups: dict[str, PendingCartCleanup] = {}
        self._orders: dict[str, object] = {}
        self._orders_by_charge: dict[str, str] = {}
        self._failures: dict[str, int | None] = {}
        self._sequence = itertools.count()
        self.calls: list[str] = []

    # Test helpers

    def add_item(self, name, price, description=None, image_url=None, id=None) -> Item:
        item = Item(
            id=id or str(uuid4()),
            name=name,
            price=price,
            description=description,
            image_url=image_url,
        )
        with self._lock:
            self._items[item.id] = {
                "id": item.id,
                "name": item.name,
                "price": item.price,
                "description": item.description,
                "image_url": item.image_url,
            }
        return item

    def fail_on(self, operation: str, times: int | None = None):
        """Make ``operation`` raise ``StoreUnavailable``.

        ``times`` limits the number of failures; ``None`` fails until cleared.
        """
        with self._lock:
            self._failures[operation] = times

    def clear_failures(self):
        with self._lock:
            self._failures.clear()

    def cart_rows(self, user_id: str) -> list[dict]:
        with self._lock:
            return [dict(row) for row in self._cart_items.values() if row["user_id"] == user_id]

    def lease_holder(self, user_id: str) -> str | None:
        with self._lock:
            lease = self._leases.get(user_id)
            if lease and lease[1] > self._clock():
                return lease[0]
            return None

    def _enter(self, operation: str):
        self.calls.append(operation)
        if operation not in self._failures:
            return
        remaining = self._failures[operation]
        if remaining is not None:
            if remaining <= 1:
                del self._failures[operation]
            else:
                self._failures[operation] = remaining - 1
        raise StoreUnavailable(detail=f"memory store: injected failure on {operation}")

    @staticmethod
    def _to_cart_item(row: dict) -> CartItem:
        return CartItem(
            id=row["id"],
            user_id=row["user_id"],
            item_id=row["item_id"],
            quantity=row["quantity"],
        )

    # CartStore

    def find_item(self, item_id):
        with self._lock:
            self._enter("find_item")
            row = self._items.get(item_id)
        return Item(**row) if row else None

    def find_cart_item(self, user_id, item_id):
        with self._lock:
            self._enter("find_cart_item")
            cart_item_id = self._cart_index.get((user_id, item_id))
            row = dict(self._cart_items[cart_item_id]) if cart_item_id else None
        return self._to_cart_item(row) if row else None

    def create_cart_item(self, user_id, item_id, quantity=1):
        with self._lock:
            self._enter("create_cart_item")
            if (user_id, item_id) in self._cart_index:
                raise WriteConflict(detail=f"cart item exists for user {user_id} and item {item_id}")
            row = {
                "id": str(uuid4()),
                "user_id": user_id,
                "item_id": item_id,
                "quantity": quantity,
                "created_seq": next(self._sequence),
            }
            self._cart_items[row["id"]] = row
            self._cart_index[(user_id, item_id)] = row["id"]
            row = dict(row)
        return self._to_cart_item(row)

    def update_cart_item_quantity(self, cart_item_id, expected_quantity, quantity):
        with self._lock:
            self._enter("update_cart_item_quantity")
            row = self._cart_items.get(cart_item_id)
            if row is None or row["quantity"] != expected_quantity:
                raise WriteConflict(detail=f"cart item {cart_item_id} changed since it was read")
            row["quantity"] = quantity
            row = dict(row)
        return self._to_cart_item(row)

    def load_cart(self, user_id):
        with self._lock:
            self._enter("load_cart")
            rows = sorted(
                (row for row in self._cart_items.values() if row["user_id"] == user_id),
                key=lambda row: row["created_seq"],
            )
            lines = []
            for row in rows:
                item = self._items.get(row["item_id"])
                if item is None:
                    # Catalogue entry deleted under the cart row
                    logger.warning("Cart row references missing item", cart_item_id=row["id"])
                    continue
                lines.append(
                    CartLine(
                        cart_item_id=row["id"],
                        item_id=row["item_id"],
                        quantity=row["quantity"],
                        name=item["name"],
                        price=item["price"],
                        description=item["description"],
                        image_url=item["image_url"],
                    )
                )
        return lines

    def delete_cart_items(self, cart_item_ids):
        deleted = 0
        with self._lock:
            self._enter("delete_cart_items")
            for cart_item_id in cart_item_ids:
                row = self._cart_items.pop(cart_item_id, None)
                if row is None:
                    continue
                self._cart_index.pop((row["user_id"], row["item_id"]), None)
                deleted += 1
        return deleted

    def acquire_checkout_lease(self, user_id, owner, ttl_seconds):
        with self._lock:
            self._enter("acquire_checkout_lease")
            now = self._clock()
            lease = self._leases.get(user_id)
            if lease and lease[1] > now and lease[0] != owner:
                return False
            self._leases[user_id] = (owner, now + ttl_seconds)
            return True

    def release_checkout_lease(self, user_id, owner):
        with self._lock:
            self._enter("release_checkout_lease")
            lease = self._leases.get(user_id)
            if lease is None or lease[0] != owner:
                return False
            del self._leases[user_id]
            return True

    def record_pending_cleanup(self, user_id, order_id, cart_item_ids):
        cleanup = PendingCartCleanup(
            id=str(uuid4()),
            user_id=user_id,
            order_id=order_id,
            cart_item_ids=tuple(cart_item_ids),
        )
        with self._lock:
            self._enter("record_pending_cleanup")
            self._cleanups[cleanup.id] = cleanup
        return cleanup

    def pending_cleanups(self):
        with self._lock:
            self._enter("pending_cleanups")
            return list(self._cleanups.values())

    def resolve_pending_cleanup(self, cleanup_id):
        with self._lock:
            self._enter("resolve_pending_cleanup")
            self._cleanups.pop(cleanup_id, None)

    # OrderStore

    def create_order(self, order):
        with self._lock:
            self._enter("create_order")
            if order.charge_id in self._orders_by_charge:
                raise WriteConflict(detail=f"order already exists for charge {order.charge_id}")
            self._orders[order.id] = order
            self._orders_by_charge[order.charge_id] = order.id
        return order

    def find_order_by_charge(self, charge_id):
        with self._lock:
            self._enter("find_order_by_charge")
            order_id = self._orders_by_charge.get(charge_id)
            return self._orders.get(order_id) if order_id else None

    def orders_for(self, user_id):
        with self._lock:
            self._enter("orders_for")
            return [order for order in self._orders.values() if order.user_id == user_id]
