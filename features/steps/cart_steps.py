import asyncio

from behave import given, when, then # type: ignore

from rocketcart.application.cart.reconciler import CartReconciler
from rocketcart.domain.cart.errors import ProductLookupError
from rocketcart.domain.cart.line_items import LineItem, ProductInfo, StockInfo
from rocketcart.infrastructure.repositories.cart_storage import InMemoryCartStorage


class TableInventory:
    """Stock and catalog answers from the scenario's Given steps"""

    def __init__(self):
        self.stock: dict[int, int] = {}

    async def get_stock(self, product_id: int) -> StockInfo:
        if product_id not in self.stock:
            raise ProductLookupError(f"Product {product_id} not found")
        return StockInfo(product_id=product_id, available_quantity=self.stock[product_id])

    async def get_product(self, product_id: int) -> ProductInfo:
        if product_id not in self.stock:
            raise ProductLookupError(f"Product {product_id} not found")
        return ProductInfo(
            product_id=product_id,
            title=f"Sneaker {product_id}",
            image_url=f"https://cdn/{product_id}.jpg",
            unit_price=100.0,
        )


class CollectedNotifications:
    def __init__(self):
        self.messages: list[str] = []

    async def notify_error(self, message: str) -> None:
        self.messages.append(message)


def _reconciler(context) -> CartReconciler:
    if not hasattr(context, "reconciler"):
        context.reconciler = asyncio.run(
            CartReconciler.open(context.storage, context.inventory, context.inventory, context.notifier)
        )
    return context.reconciler


def _setup(context):
    if not hasattr(context, "inventory"):
        context.inventory = TableInventory()
        context.storage = InMemoryCartStorage("scenario:cart")
        context.notifier = CollectedNotifications()
        context.seed = []


@given(u'the stock of product {product_id:d} is {amount:d}')
def step_stock(context, product_id, amount):
    _setup(context)
    context.inventory.stock[product_id] = amount


@given(u'the cart is empty')
def step_empty_cart(context):
    _setup(context)
    asyncio.run(context.storage.save([]))


@given(u'the cart contains product {product_id:d} with amount {amount:d}')
def step_seed_cart(context, product_id, amount):
    _setup(context)
    product = asyncio.run(context.inventory.get_product(product_id))
    context.seed.append(LineItem.from_product(product, quantity=amount))
    asyncio.run(context.storage.save(context.seed))


@when(u'I add product {product_id:d}')
def step_add(context, product_id):
    context.outcome = asyncio.run(_reconciler(context).add(product_id))


@when(u'I remove product {product_id:d}')
def step_remove(context, product_id):
    context.outcome = asyncio.run(_reconciler(context).remove(product_id))


@when(u'I set the amount of product {product_id:d} to {amount:d}')
def step_set_amount(context, product_id, amount):
    context.outcome = asyncio.run(_reconciler(context).set_quantity(product_id, amount))


@then(u'the cart contains')
def step_check_cart(context):
    expected = [(int(row['id']), int(row['amount'])) for row in context.table]
    actual = [(item.product_id, item.quantity) for item in context.reconciler.cart]
    assert actual == expected, f"{actual} != {expected}"


@then(u'the cart is empty')
def step_check_empty(context):
    assert context.reconciler.cart == []


@then(u'the stored cart matches the cart')
def step_check_stored(context):
    assert asyncio.run(context.storage.load()) == context.reconciler.cart


@then(u'no error was reported')
def step_no_error(context):
    assert context.outcome.succeeded
    assert context.notifier.messages == []


@then(u'the operation failed with {error_name}')
def step_failed_with(context, error_name):
    assert type(context.outcome.error).__name__ == error_name


@then(u'the error "{message}" was reported')
def step_reported(context, message):
    assert context.notifier.messages[-1] == message
