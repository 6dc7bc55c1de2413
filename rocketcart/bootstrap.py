from contextlib import AsyncExitStack, asynccontextmanager
import logging
from typing import AsyncIterator

import redis.asyncio as aioredis

from rocketcart import config
from rocketcart.application.cart.reconciler import CartReconciler
from rocketcart.domain.cart.ports import CartStorage, CatalogQuery, InventoryQuery, Notifier
from rocketcart.infrastructure.catalog_client import HttpCatalogClient
from rocketcart.infrastructure.database import CartDatabase
from rocketcart.infrastructure.notifier.log import LoggingNotifier
from rocketcart.infrastructure.notifier.push import RedisPushNotifier
from rocketcart.infrastructure.repositories.cart_storage import (
    InMemoryCartStorage,
    RedisCartStorage,
    SqlCartStorage,
)

logger = logging.getLogger(__name__)


def configure_logging(level: str = config.LOG_LEVEL) -> None:
    logging.basicConfig(level=level, format=config.LOG_FORMAT)


async def _build_storage(backend: str, stack: AsyncExitStack) -> CartStorage:
    if backend == "memory":
        return InMemoryCartStorage(config.CART_STORAGE_KEY)

    if backend == "sql":
        db = CartDatabase(config.DATABASE_URL)
        stack.push_async_callback(db.close)
        await db.create_tables()
        logger.info(f"Cart storage: {config.DATABASE_URL}")
        return SqlCartStorage(db.session_factory, config.CART_STORAGE_KEY)

    if backend == "redis":
        client = _redis_client(stack)
        logger.info(f"Cart storage: {config.REDIS_URL}")
        return RedisCartStorage(client, config.CART_STORAGE_KEY)

    raise ValueError(f"Unknown cart storage backend: {backend}")


def _build_notifier(backend: str, stack: AsyncExitStack) -> Notifier:
    if backend == "log":
        return LoggingNotifier()

    if backend == "redis":
        return RedisPushNotifier(_redis_client(stack), config.NOTIFICATIONS_CHANNEL)

    raise ValueError(f"Unknown notifier backend: {backend}")


def _redis_client(stack: AsyncExitStack):
    client = aioredis.from_url(config.REDIS_URL, decode_responses=True)
    stack.push_async_callback(client.aclose)
    return client


@asynccontextmanager
async def open_cart(
    storage: CartStorage | None = None,
    catalog: CatalogQuery | None = None,
    inventory: InventoryQuery | None = None,
    notifier: Notifier | None = None,
    storage_backend: str = config.CART_STORAGE_BACKEND,
    notifier_backend: str = config.NOTIFIER_BACKEND,
) -> AsyncIterator[CartReconciler]:
    """
    Open a cart session wired from configuration.

    Collaborators passed explicitly take precedence over the configured
    backends. Everything created here is closed when the session ends.
    """
    async with AsyncExitStack() as stack:
        if storage is None:
            storage = await _build_storage(storage_backend, stack)

        if catalog is None:
            client = HttpCatalogClient(config.CATALOG_SERVICE_URL, timeout=config.CATALOG_TIMEOUT)
            stack.push_async_callback(client.aclose)
            logger.info(f"Catalog service: {config.CATALOG_SERVICE_URL}")
            catalog = client

        if inventory is None:
            # the catalog service answers stock queries too
            inventory = catalog

        if notifier is None:
            notifier = _build_notifier(notifier_backend, stack)

        yield await CartReconciler.open(storage, inventory, catalog, notifier)
