"""Ordering store port — persistence interface for carts, checkouts and orders.

Every method that has to hold up under concurrent calls for the same user is
a conditional write: it either applies atomically against the state it was
told to expect, or raises ``WriteConflict`` and changes nothing. Transient
backend failures raise ``StoreUnavailable``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CartLine:
    """A cart row joined with the catalogue item it points to."""

    cart_item_id: str
    item_id: str
    quantity: int
    name: str
    price: int
    description: str | None = None
    image_url: str | None = None

    def line_total(self) -> int:
        return self.price * self.quantity


@dataclass(frozen=True)
class PendingCartCleanup:
    """Cart rows left behind by a checkout whose order is already durable."""

    id: str
    user_id: str
    order_id: str
    cart_item_ids: tuple[str, ...] = field(default_factory=tuple)


class CartStore(ABC):
    @abstractmethod
    def find_item(self, item_id: str):
        """Return the catalogue ``Item`` or ``None``."""
        ...

    @abstractmethod
    def find_cart_item(self, user_id: str, item_id: str):
        """Return the ``CartItem`` for the pair or ``None``."""
        ...

    @abstractmethod
    def create_cart_item(self, user_id: str, item_id: str, quantity: int = 1):
        """Create a CartItem if none exists for ``(user_id, item_id)``.

        Raises ``WriteConflict`` if a row for the pair already exists.
        """
        ...

    @abstractmethod
    def update_cart_item_quantity(self, cart_item_id: str, expected_quantity: int, quantity: int):
        """Set ``quantity`` only if the stored value still equals ``expected_quantity``.

        Raises ``WriteConflict`` when the row changed or disappeared.
        """
        ...

    @abstractmethod
    def load_cart(self, user_id: str) -> list[CartLine]:
        """Return the user's cart rows joined with item data, oldest first."""
        ...

    @abstractmethod
    def delete_cart_items(self, cart_item_ids) -> int:
        """Delete exactly the given rows. Missing rows are ignored."""
        ...

    @abstractmethod
    def acquire_checkout_lease(self, user_id: str, owner: str, ttl_seconds: int) -> bool:
        """Take the per-user checkout lease unless someone else holds a live one."""
        ...

    @abstractmethod
    def release_checkout_lease(self, user_id: str, owner: str) -> bool:
        """Release the lease only if ``owner`` still holds it."""
        ...

    @abstractmethod
    def record_pending_cleanup(self, user_id: str, order_id: str, cart_item_ids) -> PendingCartCleanup: ...

    @abstractmethod
    def pending_cleanups(self) -> list[PendingCartCleanup]: ...

    @abstractmethod
    def resolve_pending_cleanup(self, cleanup_id: str) -> None: ...


class OrderStore(ABC):
    @abstractmethod
    def create_order(self, order):
        """Persist a new Order. Orders are never updated."""
        ...

    @abstractmethod
    def find_order_by_charge(self, charge_id: str):
        """Return the Order paid for by ``charge_id`` or ``None``."""
        ...

    @abstractmethod
    def orders_for(self, user_id: str) -> list: ...
