"""Domain tests for cart line-item merging and totals recomputation."""

import pytest
from catalogue.product.product import Catalog
from ordering.cart.cart import Cart, LineItem, compute_totals
from ordering.order.order import Order, order_number, snapshot_items
from shared.errors import InvalidProduct


def _cart(**overrides):
    return Cart(id="c" * 20, user_id="u" * 20, **overrides)


class TestMergeItem:
    def test_new_cart_is_empty_with_zero_totals(self):
        cart = _cart()
        assert cart.is_empty
        assert cart.payment.total == 0
        assert cart.payment.tax == 0
        assert cart.payment.currency == "USD"

    def test_merge_computes_totals(self, catalog):
        cart = _cart()
        cart.merge_item(298740, 2, catalog)
        assert cart.payment.total == 40
        assert cart.payment.tax == 3.52

    def test_merge_same_product_increments_quantity(self, catalog):
        cart = _cart()
        cart.merge_item(298740, 2, catalog)
        cart.merge_item(298741, 1, catalog)
        cart.merge_item(298740, 1, catalog)

        assert [(item.product_id, item.quantity) for item in cart.items] == [(298740, 3), (298741, 1)]
        assert cart.payment.total == 82
        assert cart.payment.tax == 7.22

    def test_totals_are_recomputed_not_drifted(self, catalog):
        cart = _cart(items=[LineItem(product_id=298742, quantity=1)])
        # Stale totals in the stored document
        cart.payment.total = 999
        cart.merge_item(298742, 2, catalog)
        assert cart.payment.total == 73.5
        assert cart.payment.tax == 6.48

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_non_positive_quantity(self, catalog, quantity):
        cart = _cart()
        with pytest.raises(InvalidProduct):
            cart.merge_item(298740, quantity, catalog)
        assert cart.is_empty

    def test_unknown_product(self, catalog):
        with pytest.raises(InvalidProduct):
            _cart().merge_item(1, 1, catalog)

    def test_currency_mismatch(self):
        catalog = Catalog.from_records(
            [{"id": 1, "name": "Euro Pizza", "price": {"total": 9, "tax": 1, "currency": "EUR"}}]
        )
        with pytest.raises(InvalidProduct):
            _cart().merge_item(1, 1, catalog)

    def test_compute_totals_over_many_lines(self, catalog):
        items = [LineItem(product_id=pid, quantity=1) for pid in catalog]
        totals = compute_totals(items, catalog)
        assert totals.total == 20 + 22 + 6 * 24.5
        assert totals.tax == round(1.76 + 1.94 + 6 * 2.16, 2)


class TestOrderSnapshot:
    def test_order_number_format(self):
        code, stamp = order_number(1_704_067_200_000).split("-")
        assert len(code) == 5
        assert code == code.upper()
        assert stamp == "1704067200000"

    def test_snapshot_copies_catalog_name_and_price(self, catalog):
        cart = _cart()
        cart.merge_item(298745, 2, catalog)
        (item,) = snapshot_items(cart, catalog)
        assert item.id == 298745
        assert item.name == "Hawaiian Pizza"
        assert item.price.total == 24.5
        assert item.quantity == 2

    def test_snapshot_fails_for_product_no_longer_sold(self, catalog):
        cart = _cart(items=[LineItem(product_id=1, quantity=1)])
        with pytest.raises(InvalidProduct):
            snapshot_items(cart, catalog)

    def test_order_document_is_independent_of_later_cart_changes(self, catalog):
        from identity.user.user import User

        user = User(
            id="u" * 20,
            first_name="Jane",
            last_name="Doe",
            email="jane@example.com",
            hashed_password="x",
            address1="1 Main",
            city="Springfield",
            state="IL",
            postal_code="62701",
        )
        cart = _cart()
        cart.merge_item(298740, 1, catalog)
        order = Order.place(cart, user, snapshot_items(cart, catalog), charge_id="ch_1", now=1_704_067_200_000)

        cart.merge_item(298740, 5, catalog)

        assert order.totals.total == 20
        assert order.customer == "Jane Doe"
        assert order.placed_at == "2024-01-01T00:00:00+00:00"
        assert Order.model_validate(order.to_document()) == order
