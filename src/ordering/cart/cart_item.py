"""CartItem aggregate — one row per (user, catalogue item) pair.

The cart is not an aggregate of its own: it is the set of a user's CartItem
rows. Uniqueness of the pair and the quantity increment are enforced by
conditional writes in the store, not by loading a whole cart.
"""

from protean.fields import Identifier, Integer

from ordering.domain import ordering


@ordering.aggregate
class CartItem:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
