from pydantic import BaseModel, ConfigDict, Field


class ProductInfo(BaseModel):
    """Catalog metadata for a product, as served by the catalog service"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    product_id: int = Field(alias="id")
    title: str
    image_url: str = Field(alias="image")
    unit_price: float = Field(alias="price", ge=0)


class StockInfo(BaseModel):
    """Point-in-time stock read for a product. Never cached."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    product_id: int = Field(alias="id")
    available_quantity: int = Field(alias="amount", ge=0)


class LineItem(BaseModel):
    """Value object representing one product entry in the cart"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    product_id: int = Field(alias="id")
    title: str
    image_url: str = Field(alias="image")
    unit_price: float = Field(alias="price", ge=0)
    quantity: int = Field(alias="amount", ge=1)

    @classmethod
    def from_product(cls, product: ProductInfo, quantity: int = 1) -> "LineItem":
        return cls(
            product_id=product.product_id,
            title=product.title,
            image_url=product.image_url,
            unit_price=product.unit_price,
            quantity=quantity,
        )

    @property
    def subtotal(self) -> float:
        return self.unit_price * self.quantity


# === Cart helpers ===
# A cart is an ordered list[LineItem], unique by product_id.
# Every helper returns a new list and leaves its input untouched.

def find_item(cart: list[LineItem], product_id: int) -> LineItem | None:
    for item in cart:
        if item.product_id == product_id:
            return item
    return None


def quantity_of(cart: list[LineItem], product_id: int) -> int:
    """Quantity of product_id in the cart, 0 if absent"""
    item = find_item(cart, product_id)
    return item.quantity if item else 0


def append_item(cart: list[LineItem], item: LineItem) -> list[LineItem]:
    if find_item(cart, item.product_id) is not None:
        raise ValueError(f"Product {item.product_id} already in cart")
    return [*cart, item]


def with_quantity(cart: list[LineItem], product_id: int, quantity: int) -> list[LineItem]:
    """
    Replace the quantity of product_id, keeping positions.
    A quantity of 0 or less drops the item instead of storing it.
    """
    if quantity <= 0:
        return without_item(cart, product_id)

    return [
        item.model_copy(update={"quantity": quantity}) if item.product_id == product_id else item
        for item in cart
    ]


def without_item(cart: list[LineItem], product_id: int) -> list[LineItem]:
    return [item for item in cart if item.product_id != product_id]
