"""Order aggregate — the durable record of a paid checkout.

An Order is created exactly once per successful charge and never modified
afterwards. Its line items are snapshots of catalogue data taken when the
cart was loaded, so price history stays intact when the catalogue changes.

Invariants established by ``Order.place``:
    total == sum(item.price * item.quantity)
    total == amount captured by the referenced charge
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text

from ordering.domain import ordering


@ordering.entity(part_of="Order")
class OrderItem:
    """Snapshot of a catalogue item and the quantity bought."""

    name = String(required=True, max_length=255)
    price = Integer(required=True, min_value=0)
    description = Text()
    image_url = String(max_length=2048)
    quantity = Integer(required=True, min_value=1)

    def line_total(self) -> int:
        return self.price * self.quantity


@ordering.aggregate
class Order:
    user_id = Identifier(required=True)
    total = Integer(required=True, min_value=0)
    charge_id = String(required=True, max_length=255)
    currency = String(max_length=3, default="USD")
    items = HasMany(OrderItem)
    created_at = DateTime()

    @classmethod
    def place(cls, user_id, lines, charge_id, charged_amount, currency):
        """Materialize an Order from cart lines and the charge that paid for them.

        Args:
            user_id: The authenticated user who checked out.
            lines: ``CartLine`` snapshots loaded at the start of checkout.
            charge_id: Gateway charge id, the order's reconciliation key.
            charged_amount: Amount the gateway reports as captured.
            currency: Currency the charge was made in.
        """
        if not lines:
            raise ValidationError({"items": ["An order needs at least one item"]})

        total = sum(line.price * line.quantity for line in lines)
        if total != charged_amount:
            raise ValidationError(
                {"total": [f"Order total {total} does not match charged amount {charged_amount}"]}
            )

        order = cls(
            user_id=user_id,
            total=total,
            charge_id=charge_id,
            currency=currency,
            created_at=datetime.now(UTC),
        )
        for line in lines:
            order.add_items(
                OrderItem(
                    name=line.name,
                    price=line.price,
                    description=line.description,
                    image_url=line.image_url,
                    quantity=line.quantity,
                )
            )
        return order

    def items_total(self) -> int:
        return sum(item.line_total() for item in self.items)
