"""
Tests for cart models
"""

import json
from decimal import Decimal

import pytest
from pydantic import ValidationError

from storefront.cart import Cart, CartLineItem, ShippingPolicy
from storefront.models import Product, ProductRating


class TestCartLineItem:
    """Tests for CartLineItem dataclass."""

    def test_from_product_copies_every_field(self, make_product):
        product = make_product(7, price="12.50", title="Lamp", category="home")

        item = CartLineItem.from_product(product)

        assert item.id == 7
        assert item.title == "Lamp"
        assert item.price == Decimal("12.50")
        assert item.category == "home"
        assert item.image == product.image
        assert item.description == product.description
        assert item.rating == ProductRating(rate=4.1, count=259)
        assert item.quantity == 1

    def test_line_total(self):
        item = CartLineItem(id=1, title="Test", price=Decimal("19.99"), quantity=3)

        assert item.line_total == Decimal("59.97")

    def test_to_dict_keeps_price_as_string(self):
        item = CartLineItem(id=1, title="Test", price=Decimal("0.10"), quantity=2)

        data = item.to_dict()

        assert data["price"] == "0.10"
        assert data["quantity"] == 2
        assert data["rating"] == {"rate": 0.0, "count": 0}

    def test_from_dict_accepts_numeric_price(self):
        """Snapshots written by the browser stored prices as numbers."""
        item = CartLineItem.from_dict({"id": 1, "title": "Test", "price": 109.95, "quantity": 1})

        assert item.price == Decimal("109.95")

    @pytest.mark.parametrize("quantity", [0, -1, 1.5, "2", True, None])
    def test_from_dict_rejects_bad_quantity(self, quantity):
        with pytest.raises(ValueError):
            CartLineItem.from_dict({"id": 1, "title": "Test", "price": "1.00", "quantity": quantity})

    def test_from_dict_rejects_negative_price(self):
        with pytest.raises(ValueError):
            CartLineItem.from_dict({"id": 1, "title": "Test", "price": "-1.00", "quantity": 1})

    def test_from_dict_requires_title(self):
        with pytest.raises(KeyError):
            CartLineItem.from_dict({"id": 1, "price": "1.00", "quantity": 1})


class TestShippingPolicy:
    """Free shipping only strictly above the threshold."""

    @pytest.mark.parametrize(
        "subtotal, expected_fee",
        [
            ("0", "10.00"),
            ("49.99", "10.00"),
            ("50.00", "10.00"),
            ("50.01", "0"),
            ("60.00", "0"),
        ],
    )
    def test_fee_for(self, subtotal, expected_fee):
        policy = ShippingPolicy()

        assert policy.fee_for(Decimal(subtotal)) == Decimal(expected_fee)

    def test_configurable_values(self):
        policy = ShippingPolicy(free_shipping_threshold=Decimal("100"), flat_fee=Decimal("4.99"))

        assert policy.fee_for(Decimal("99.99")) == Decimal("4.99")
        assert policy.fee_for(Decimal("100.01")) == Decimal("0")

    def test_remaining_for_free_shipping(self):
        policy = ShippingPolicy()

        assert policy.remaining_for_free_shipping(Decimal("39.98")) == Decimal("10.02")
        assert policy.remaining_for_free_shipping(Decimal("75")) == Decimal("0")


class TestCart:
    """Tests for Cart dataclass."""

    def test_empty_cart(self):
        cart = Cart()

        assert cart.is_empty
        assert cart.item_count == 0
        assert cart.subtotal == Decimal("0")

    def test_totals_are_exact(self):
        cart = Cart(items=[
            CartLineItem(id=i, title=f"Item {i}", price=Decimal("0.10"), quantity=1)
            for i in range(3)
        ])

        # 0.1 + 0.1 + 0.1 drifts in float arithmetic
        assert cart.subtotal == Decimal("0.30")
        assert cart.item_count == 3

    def test_summarize(self):
        cart = Cart(items=[
            CartLineItem(id=1, title="A", price=Decimal("19.99"), quantity=2),
            CartLineItem(id=2, title="B", price=Decimal("5.00"), quantity=1),
        ])

        summary = cart.summarize(ShippingPolicy())

        assert summary.line_count == 2
        assert summary.item_count == 3
        assert summary.subtotal == Decimal("44.98")
        assert summary.shipping_fee == Decimal("10.00")
        assert summary.total == Decimal("54.98")
        assert summary.free_shipping is False

    def test_snapshot_round_trip_preserves_order_and_fields(self, make_product):
        cart = Cart(items=[
            CartLineItem.from_product(make_product(3, price="64.00")),
            CartLineItem.from_product(make_product("sku-9", price="0.99"), quantity=5),
            CartLineItem.from_product(make_product(1, price="19.99"), quantity=2),
        ])

        restored = Cart.from_list(json.loads(json.dumps(cart.to_list())))

        assert restored == cart
        assert [item.id for item in restored.items] == [3, "sku-9", 1]

    def test_from_list_rejects_duplicates(self):
        entry = {"id": 1, "title": "Test", "price": "1.00", "quantity": 1}

        with pytest.raises(ValueError):
            Cart.from_list([entry, dict(entry)])

    def test_from_list_rejects_non_list(self):
        with pytest.raises(TypeError):
            Cart.from_list({"items": []})


class TestProduct:
    """Tests for the catalog Product model."""

    def test_float_price_becomes_exact_decimal(self):
        product = Product.model_validate({"id": 1, "title": "Test", "price": 22.3})

        assert product.price == Decimal("22.3")

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            Product.model_validate({"id": 1, "title": "Test", "price": -5})

    def test_rating_bounds(self):
        with pytest.raises(ValidationError):
            Product.model_validate({"id": 1, "title": "Test", "price": 1, "rating": {"rate": 6, "count": 1}})
