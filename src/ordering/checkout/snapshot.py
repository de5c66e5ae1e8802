"""Cart snapshot taken at the start of checkout.

Everything after the charge works off this snapshot, never off a fresh cart
read: the order is built from these lines and exactly these cart rows are
deleted, so an item added mid-checkout stays in the cart.
"""

import hashlib
import json
from dataclasses import dataclass

from ordering.store.port import CartLine


@dataclass(frozen=True)
class CartSnapshot:
    user_id: str
    lines: tuple[CartLine, ...]

    def amount(self) -> int:
        return sum(line.line_total() for line in self.lines)

    def cart_item_ids(self) -> list[str]:
        return [line.cart_item_id for line in self.lines]

    def digest(self) -> str:
        """Stable hash of which cart rows are being bought, in what quantity and at which prices.

        Row ids tie the hash to this cart: a retry sees the same rows because
        they are only deleted once the order exists, while buying the same
        items again later always goes through freshly created rows.
        """
        content = sorted((line.cart_item_id, line.item_id, line.quantity, line.price) for line in self.lines)
        return hashlib.sha256(json.dumps(content).encode()).hexdigest()

    def idempotency_key(self, attempt_epoch: str = "0") -> str:
        """Key for the charge request.

        Retrying the same checkout reproduces the key, so the gateway replays
        the original charge instead of taking payment twice. A new
        ``attempt_epoch`` (e.g. after a declined card) makes a new key.
        """
        raw = f"{self.user_id}:{self.digest()}:{attempt_epoch}"
        return "checkout-" + hashlib.sha256(raw.encode()).hexdigest()[:32]
