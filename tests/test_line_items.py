import pytest
from pydantic import ValidationError

from rocketcart.domain.cart.line_items import (
    LineItem,
    ProductInfo,
    append_item,
    find_item,
    quantity_of,
    with_quantity,
    without_item,
)

from conftest import PRODUCTS, line_item


class TestLineItem:
    """Unit tests for LineItem and the cart helpers, no I/O"""

    def test_from_product_copies_metadata(self):
        item = LineItem.from_product(PRODUCTS[2])

        assert item.product_id == 2
        assert item.title == "Running Sneaker"
        assert item.unit_price == 139.9
        assert item.quantity == 1

    def test_subtotal(self):
        assert line_item(1, 3).subtotal == pytest.approx(539.7)

    def test_quantity_must_be_positive(self):
        with pytest.raises(ValidationError):
            LineItem.from_product(PRODUCTS[1], quantity=0)

    def test_accepts_storefront_field_names(self):
        """Test: snapshot and catalog payloads use id / image / price / amount"""
        item = LineItem.model_validate(
            {"id": 5, "title": "Sneaker", "image": "https://cdn/5.jpg", "price": 99.5, "amount": 2}
        )

        assert item.product_id == 5
        assert item.image_url == "https://cdn/5.jpg"
        assert item.model_dump(by_alias=True) == {
            "id": 5, "title": "Sneaker", "image": "https://cdn/5.jpg", "price": 99.5, "amount": 2,
        }

    def test_product_price_cannot_be_negative(self):
        with pytest.raises(ValidationError):
            ProductInfo(product_id=1, title="x", image_url="y", unit_price=-1)


class TestCartHelpers:

    def test_find_and_quantity_of(self):
        cart = [line_item(1, 2), line_item(2)]

        assert find_item(cart, 2).product_id == 2
        assert find_item(cart, 3) is None
        assert quantity_of(cart, 1) == 2
        assert quantity_of(cart, 3) == 0

    def test_append_keeps_order_and_input(self):
        cart = [line_item(2)]

        updated = append_item(cart, line_item(1))

        assert [item.product_id for item in updated] == [2, 1]
        assert len(cart) == 1

    def test_append_rejects_duplicate(self):
        with pytest.raises(ValueError, match="Product 1 already in cart"):
            append_item([line_item(1)], line_item(1))

    def test_with_quantity_keeps_position(self):
        cart = [line_item(1), line_item(2), line_item(3)]

        updated = with_quantity(cart, 2, 4)

        assert [(i.product_id, i.quantity) for i in updated] == [(1, 1), (2, 4), (3, 1)]
        assert cart[1].quantity == 1

    def test_with_quantity_zero_drops_item(self):
        updated = with_quantity([line_item(1), line_item(2)], 1, 0)

        assert [item.product_id for item in updated] == [2]

    def test_without_item(self):
        cart = [line_item(1), line_item(2), line_item(3)]

        assert [item.product_id for item in without_item(cart, 2)] == [1, 3]
        assert without_item(cart, 9) == cart
