"""Catalogue Item aggregate — a read-only entry as far as ordering is concerned.

Prices are integers in minor currency units (cents). Checkout copies the
fields it needs into OrderItem snapshots, so later catalogue edits never
change a placed order.
"""

from protean.fields import Integer, String, Text

from ordering.domain import ordering


@ordering.aggregate
class Item:
    name = String(required=True, max_length=255)
    price = Integer(required=True, min_value=0)
    description = Text()
    image_url = String(max_length=2048)
