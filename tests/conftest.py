import asyncio

import pytest

from rocketcart.application.cart.reconciler import CartReconciler
from rocketcart.domain.cart.errors import PersistenceError, ProductLookupError
from rocketcart.domain.cart.line_items import LineItem, ProductInfo, StockInfo
from rocketcart.infrastructure.repositories.cart_storage import InMemoryCartStorage, encode_cart


PRODUCTS = {
    1: ProductInfo(product_id=1, title="Walking Sneaker", image_url="https://cdn/1.jpg", unit_price=179.9),
    2: ProductInfo(product_id=2, title="Running Sneaker", image_url="https://cdn/2.jpg", unit_price=139.9),
    3: ProductInfo(product_id=3, title="VR Sneaker", image_url="https://cdn/3.jpg", unit_price=219.9),
}


def line_item(product_id: int, quantity: int = 1) -> LineItem:
    return LineItem.from_product(PRODUCTS[product_id], quantity=quantity)


class FakeInventory:
    """Stock table with a call log. Yields to the loop on every read like a remote call."""

    def __init__(self, stock: dict[int, int] | None = None):
        self.stock = dict(stock or {})
        self.calls: list[int] = []

    async def get_stock(self, product_id: int) -> StockInfo:
        self.calls.append(product_id)
        await asyncio.sleep(0)
        if product_id not in self.stock:
            raise ProductLookupError(f"Product {product_id} not found")
        return StockInfo(product_id=product_id, available_quantity=self.stock[product_id])


class FakeCatalog:
    def __init__(self, products: dict[int, ProductInfo] | None = None):
        self.products = dict(PRODUCTS if products is None else products)
        self.calls: list[int] = []

    async def get_product(self, product_id: int) -> ProductInfo:
        self.calls.append(product_id)
        await asyncio.sleep(0)
        if product_id not in self.products:
            raise ProductLookupError(f"Product {product_id} not found")
        return self.products[product_id]


class RecordingNotifier:
    def __init__(self):
        self.messages: list[str] = []

    async def notify_error(self, message: str) -> None:
        self.messages.append(message)


class SpyStorage(InMemoryCartStorage):
    """In-memory storage that counts writes and can be told to fail them"""

    def __init__(self, key: str = "test:cart"):
        super().__init__(key)
        self.saves = 0
        self.fail_saves = False

    async def save(self, cart: list[LineItem]) -> None:
        if self.fail_saves:
            raise PersistenceError("disk full")
        self.saves += 1
        await super().save(cart)


@pytest.fixture
def inventory():
    return FakeInventory({1: 5, 2: 5, 3: 1})


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def storage():
    return SpyStorage()


@pytest.fixture
def make_reconciler(storage, inventory, catalog, notifier):
    """Build a reconciler whose cart (and stored snapshot) starts as the given items"""

    def _make(items: list[LineItem] | None = None) -> CartReconciler:
        if items is not None:
            storage._blobs[storage.key] = encode_cart(items)
        return CartReconciler(storage, inventory, catalog, notifier, items)

    return _make