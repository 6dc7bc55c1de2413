import asyncio
import logging

from rocketcart.domain.cart.errors import (
    AddFailedError,
    CartError,
    NotInCartError,
    OutOfStockError,
    ProductLookupError,
    UpdateFailedError,
)
from rocketcart.domain.cart.line_items import (
    LineItem,
    StockInfo,
    append_item,
    find_item,
    quantity_of,
    with_quantity,
    without_item,
)
from rocketcart.domain.cart.ports import CartStorage, CatalogQuery, InventoryQuery, Notifier

logger = logging.getLogger(__name__)


class OperationOutcome:
    """Result of a cart operation: the cart after the call and the error that stopped it, if any"""

    def __init__(self, cart: list[LineItem], error: CartError | None = None):
        self.cart = cart
        self.error = error

    @property
    def succeeded(self) -> bool:
        return self.error is None


class CartReconciler:
    """
    Owns the cart of one session and reconciles every change against inventory.

    Rules:
    1. add / remove / set_quantity are serialized by a per-instance lock,
       held across the whole read-validate-write sequence
    2. Stock is re-read on every operation that changes a quantity
    3. A new cart is persisted before it replaces the in-memory one;
       if saving fails the previous cart stays in place
    4. Failures never raise to the caller: they are logged, reported to the
       notifier and returned in the OperationOutcome
    """

    def __init__(
        self,
        storage: CartStorage,
        inventory: InventoryQuery,
        catalog: CatalogQuery,
        notifier: Notifier,
        items: list[LineItem] | None = None,
    ):
        self._storage = storage
        self._inventory = inventory
        self._catalog = catalog
        self._notifier = notifier
        self._items: list[LineItem] = list(items or [])
        self._lock = asyncio.Lock()

    @classmethod
    async def open(
        cls,
        storage: CartStorage,
        inventory: InventoryQuery,
        catalog: CatalogQuery,
        notifier: Notifier,
    ) -> "CartReconciler":
        """Start a session from the persisted snapshot (empty cart if there is none)"""
        items = await storage.load()
        logger.info(f"Cart opened with {len(items or [])} line items")
        return cls(storage, inventory, catalog, notifier, items)

    @property
    def cart(self) -> list[LineItem]:
        """Last committed cart. Operations swap the whole list on commit."""
        return list(self._items)

    # === Operations ===

    async def add(self, product_id: int) -> OperationOutcome:
        """Add one unit of product_id, appending a new line item on first addition"""
        async with self._lock:
            try:
                updated = await self._with_one_more(product_id)
                await self._commit(updated)
            except CartError as e:
                return await self._reject("add", product_id, e)

            logger.info(f"Added product {product_id}, quantity now {quantity_of(updated, product_id)}")
            return OperationOutcome(self.cart)

    async def remove(self, product_id: int) -> OperationOutcome:
        async with self._lock:
            try:
                if find_item(self._items, product_id) is None:
                    raise NotInCartError(product_id)
                await self._commit(without_item(self._items, product_id))
            except CartError as e:
                return await self._reject("remove", product_id, e)

            logger.info(f"Removed product {product_id}")
            return OperationOutcome(self.cart)

    async def set_quantity(self, product_id: int, amount: int) -> OperationOutcome:
        """
        Set the absolute quantity of product_id.

        amount <= 0 is ignored without a notification. When product_id is not
        in the cart the stock is still checked, but the update is then dropped
        silently instead of failing with NotInCartError.
        """
        if amount <= 0:
            return OperationOutcome(self.cart)

        async with self._lock:
            try:
                stock = await self._stock_for(product_id, UpdateFailedError)
                if amount > stock.available_quantity:
                    raise OutOfStockError(product_id, amount, stock.available_quantity)

                current = quantity_of(self._items, product_id)
                if current == 0 or current == amount:
                    return OperationOutcome(self.cart)

                await self._commit(with_quantity(self._items, product_id, amount))
            except CartError as e:
                return await self._reject("set_quantity", product_id, e)

            logger.info(f"Set product {product_id} quantity to {amount}")
            return OperationOutcome(self.cart)

    # === Helpers ===

    async def _with_one_more(self, product_id: int) -> list[LineItem]:
        current = quantity_of(self._items, product_id)
        stock = await self._stock_for(product_id, AddFailedError)

        desired = current + 1
        if desired > stock.available_quantity:
            raise OutOfStockError(product_id, desired, stock.available_quantity)

        if current:
            return with_quantity(self._items, product_id, desired)

        try:
            product = await self._catalog.get_product(product_id)
        except ProductLookupError as e:
            raise AddFailedError(str(e)) from e

        if product.product_id != product_id:
            # stock was checked for product_id only
            mismatch = ProductLookupError(
                f"Catalog returned product {product.product_id} for {product_id}"
            )
            raise AddFailedError(str(mismatch)) from mismatch

        return append_item(self._items, LineItem.from_product(product))

    async def _stock_for(self, product_id: int, failure: type[CartError]) -> StockInfo:
        try:
            return await self._inventory.get_stock(product_id)
        except ProductLookupError as e:
            raise failure(str(e)) from e

    async def _commit(self, updated: list[LineItem]) -> None:
        # PersistenceError propagates before the in-memory cart is touched
        await self._storage.save(updated)
        self._items = updated

    async def _reject(self, operation: str, product_id: int, error: CartError) -> OperationOutcome:
        logger.warning(f"Cart {operation} rejected for product {product_id}: {error}")
        await self._notifier.notify_error(error.user_message)
        return OperationOutcome(self.cart, error)
