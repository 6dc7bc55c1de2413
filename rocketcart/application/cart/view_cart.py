from pydantic import BaseModel

from rocketcart.domain.cart.line_items import LineItem


class CartLine(BaseModel):
    """Line item as shown on the cart page, with its subtotal"""
    product_id: int
    title: str
    image_url: str
    unit_price: float
    quantity: int
    subtotal: float


class CartSummary(BaseModel):
    items: list[CartLine]
    size: int
    item_count: int
    total: float


def cart_size(cart: list[LineItem]) -> int:
    """Number of distinct products (the header badge count)"""
    return len(cart)


def item_count(cart: list[LineItem]) -> int:
    """Total number of units across all line items"""
    return sum(item.quantity for item in cart)


def cart_total(cart: list[LineItem]) -> float:
    return sum(item.subtotal for item in cart)


def amount_by_product(cart: list[LineItem]) -> dict[int, int]:
    """Quantity in cart per product_id, used to badge products in the catalog grid"""
    return {item.product_id: item.quantity for item in cart}


def summarize(cart: list[LineItem]) -> CartSummary:
    """
    Build the read-side view of a cart.

    Totals are computed from the committed line items only; the summary is
    never written back to storage.
    """
    return CartSummary(
        items=[
            CartLine(
                product_id=item.product_id,
                title=item.title,
                image_url=item.image_url,
                unit_price=item.unit_price,
                quantity=item.quantity,
                subtotal=item.subtotal,
            )
            for item in cart
        ],
        size=cart_size(cart),
        item_count=item_count(cart),
        total=cart_total(cart),
    )
