from typing import Protocol

from rocketcart.domain.cart.line_items import LineItem, ProductInfo, StockInfo


class InventoryQuery(Protocol):
    async def get_stock(self, product_id: int) -> StockInfo:
        """Raises ProductLookupError for unknown products or remote failures"""
        ...


class CatalogQuery(Protocol):
    async def get_product(self, product_id: int) -> ProductInfo:
        """Raises ProductLookupError for unknown products or remote failures"""
        ...


class CartStorage(Protocol):
    async def load(self) -> list[LineItem] | None:
        """Last committed snapshot, None if nothing was ever saved"""
        ...

    async def save(self, cart: list[LineItem]) -> None:
        """Raises PersistenceError when the snapshot cannot be written"""
        ...


class Notifier(Protocol):
    async def notify_error(self, message: str) -> None:
        """
        Fire-and-forget delivery of a user-facing message.

        Must never raise: delivery failures are handled (and logged) inside
        the notifier, since cart operations report errors through it.
        """
        ...
