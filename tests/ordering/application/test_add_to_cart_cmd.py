"""Application tests for the AddToCart command."""

import pytest
from ordering.cart.items import AddToCart, add_item_to_cart
from ordering.store.memory_adapter import MemoryOrderingStore
from protean import current_domain
from shared.errors import NotFound, StoreUnavailable, Unauthenticated


class TestAddToCartCommand:
    def test_first_add_creates_row_with_quantity_one(self, store, catalogue, user_id):
        cart_item = current_domain.process(
            AddToCart(user_id=user_id, item_id=catalogue["A"].id),
            asynchronous=False,
        )
        assert cart_item.quantity == 1
        assert cart_item.user_id == user_id
        assert cart_item.item_id == catalogue["A"].id

        rows = store.cart_rows(user_id)
        assert len(rows) == 1
        assert rows[0]["quantity"] == 1

    def test_repeat_add_increments_existing_row(self, store, catalogue, user_id):
        for _ in range(3):
            cart_item = current_domain.process(
                AddToCart(user_id=user_id, item_id=catalogue["A"].id),
                asynchronous=False,
            )

        assert cart_item.quantity == 3
        rows = store.cart_rows(user_id)
        assert len(rows) == 1
        assert rows[0]["quantity"] == 3

    def test_rows_are_per_item(self, store, catalogue, user_id):
        current_domain.process(AddToCart(user_id=user_id, item_id=catalogue["A"].id), asynchronous=False)
        current_domain.process(AddToCart(user_id=user_id, item_id=catalogue["B"].id), asynchronous=False)
        assert len(store.cart_rows(user_id)) == 2

    def test_rows_are_per_user(self, store, catalogue):
        current_domain.process(AddToCart(user_id="user-001", item_id=catalogue["A"].id), asynchronous=False)
        current_domain.process(AddToCart(user_id="user-002", item_id=catalogue["A"].id), asynchronous=False)
        assert len(store.cart_rows("user-001")) == 1
        assert len(store.cart_rows("user-002")) == 1

    def test_missing_user_is_unauthenticated(self, store, catalogue):
        with pytest.raises(Unauthenticated):
            current_domain.process(AddToCart(item_id=catalogue["A"].id), asynchronous=False)
        assert store.calls == []

    def test_unknown_item_is_not_found(self, store, user_id):
        with pytest.raises(NotFound):
            current_domain.process(AddToCart(user_id=user_id, item_id="no-such-item"), asynchronous=False)
        assert store.cart_rows(user_id) == []


class _CreateRaceStore(MemoryOrderingStore):
    """Lets a competing request insert the row between our read and our create."""

    def __init__(self):
        super().__init__()
        self.raced = False

    def create_cart_item(self, user_id, item_id, quantity=1):
        if not self.raced:
            self.raced = True
            super().create_cart_item(user_id, item_id, quantity)
        return super().create_cart_item(user_id, item_id, quantity)


class _IncrementRaceStore(MemoryOrderingStore):
    """Lets a competing request bump the quantity between our read and our write."""

    def __init__(self):
        super().__init__()
        self.raced = False

    def update_cart_item_quantity(self, cart_item_id, expected_quantity, quantity):
        if not self.raced:
            self.raced = True
            super().update_cart_item_quantity(cart_item_id, expected_quantity, expected_quantity + 1)
        return super().update_cart_item_quantity(cart_item_id, expected_quantity, quantity)


class TestAddToCartRaces:
    def test_lost_create_race_increments_winner_row(self, user_id):
        store = _CreateRaceStore()
        item = store.add_item(name="Item A", price=500)

        cart_item = add_item_to_cart(store, user_id, item.id)

        assert cart_item.quantity == 2
        assert len(store.cart_rows(user_id)) == 1

    def test_lost_increment_race_is_retried_on_fresh_quantity(self, user_id):
        store = _IncrementRaceStore()
        item = store.add_item(name="Item A", price=500)
        add_item_to_cart(store, user_id, item.id)

        cart_item = add_item_to_cart(store, user_id, item.id)

        # 1 from the first add, 1 from the competitor, 1 from the retried add
        assert cart_item.quantity == 3
        assert store.cart_rows(user_id)[0]["quantity"] == 3

    def test_store_outage_is_surfaced(self, store, catalogue, user_id):
        store.fail_on("find_cart_item")
        with pytest.raises(StoreUnavailable):
            add_item_to_cart(store, user_id, catalogue["A"].id)
