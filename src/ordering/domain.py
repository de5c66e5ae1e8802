"""Ordering bounded context — catalogue lookups, shopping cart and checkout.

Owns the cart-item upsert, the checkout saga that turns a cart into a paid
Order, and the scheduled cleanup of carts a checkout could not clear.
"""

import structlog
from protean.domain import Domain
from shared.logging import configure_logging

configure_logging()

ordering = Domain(name="ordering")

logger = structlog.get_logger(__name__)
