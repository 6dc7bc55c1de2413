import logging
from datetime import datetime, timezone

import redis
from pydantic import TypeAdapter, ValidationError
from sqlalchemy import insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rocketcart.domain.cart.errors import PersistenceError
from rocketcart.domain.cart.line_items import LineItem
from rocketcart.infrastructure.database import cart_snapshots

logger = logging.getLogger(__name__)

_snapshot = TypeAdapter(list[LineItem])


def encode_cart(cart: list[LineItem]) -> str:
    """Serialize cart to the JSON snapshot format ({id, title, image, price, amount} per item)"""
    return _snapshot.dump_json(cart, by_alias=True).decode()


def decode_cart(payload: str | bytes) -> list[LineItem]:
    try:
        cart = _snapshot.validate_json(payload)
    except ValidationError as e:
        raise PersistenceError(f"Stored cart snapshot is corrupt: {e.error_count()} errors") from e

    product_ids = [item.product_id for item in cart]
    if len(product_ids) != len(set(product_ids)):
        raise PersistenceError("Stored cart snapshot has duplicate products")
    return cart


class InMemoryCartStorage:
    """Process-local blob store. Default backend and test double."""

    def __init__(self, key: str = "rocketshoes:cart"):
        self.key = key
        self._blobs: dict[str, str] = {}

    async def load(self) -> list[LineItem] | None:
        payload = self._blobs.get(self.key)
        if payload is None:
            return None
        return decode_cart(payload)

    async def save(self, cart: list[LineItem]) -> None:
        self._blobs[self.key] = encode_cart(cart)

    def get_raw(self) -> str | None:
        """Stored snapshot exactly as written"""
        return self._blobs.get(self.key)


class SqlCartStorage:
    """
    Cart snapshot stored in the cart_snapshots table.

    save() upserts the row for this key in a single transaction; any
    SQLAlchemy error is reported as PersistenceError and the previous
    snapshot stays in place.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], key: str):
        self.session_factory = session_factory
        self.key = key

    async def load(self) -> list[LineItem] | None:
        stmt = select(cart_snapshots.c.payload).where(cart_snapshots.c.key == self.key)
        try:
            async with self.session_factory() as session:
                result = await session.execute(stmt)
                row = result.fetchone()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load cart {self.key}: {str(e)}") from e

        if row is None:
            return None
        return decode_cart(row.payload)

    async def save(self, cart: list[LineItem]) -> None:
        payload = encode_cart(cart)
        now = datetime.now(timezone.utc)

        try:
            async with self.session_factory() as session:
                async with session.begin():
                    existing = await session.execute(
                        select(cart_snapshots.c.key).where(cart_snapshots.c.key == self.key)
                    )
                    if existing.fetchone() is None:
                        stmt = insert(cart_snapshots).values(
                            key=self.key, payload=payload, updated_at=now
                        )
                    else:
                        stmt = (
                            update(cart_snapshots)
                            .where(cart_snapshots.c.key == self.key)
                            .values(payload=payload, updated_at=now)
                        )
                    await session.execute(stmt)
        except SQLAlchemyError as e:
            logger.error(f"Failed to save cart {self.key}: {e}")
            raise PersistenceError(f"Failed to save cart {self.key}: {str(e)}") from e


class RedisCartStorage:
    """Cart snapshot stored under a single Redis key"""

    def __init__(self, client, key: str):
        self.client = client
        self.key = key

    async def load(self) -> list[LineItem] | None:
        try:
            payload = await self.client.get(self.key)
        except redis.RedisError as e:
            raise PersistenceError(f"Failed to load cart {self.key}: {str(e)}") from e

        if payload is None:
            return None
        return decode_cart(payload)

    async def save(self, cart: list[LineItem]) -> None:
        try:
            await self.client.set(self.key, encode_cart(cart))
        except redis.RedisError as e:
            logger.error(f"Redis error while saving cart {self.key}: {e}")
            raise PersistenceError(f"Failed to save cart {self.key}: {str(e)}") from e
