from sqlalchemy import (
    Column,
    DateTime,
    MetaData,
    String,
    Table,
    Text,
)
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker


metadata = MetaData()

# Key-value blob store: one row per cart, payload is the JSON snapshot
cart_snapshots = Table(
    "cart_snapshots",
    metadata,
    Column("key", String(255), primary_key=True),
    Column("payload", Text, nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)


class CartDatabase:
    """Database connection manager"""

    def __init__(self, database_url: str, echo: bool = False):
        self.engine = create_async_engine(database_url, echo=echo)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    async def create_tables(self) -> None:
        """Create all tables in database"""
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

    async def drop_tables(self) -> None:
        """Drop all tables (for testing)"""
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.drop_all)

    async def close(self) -> None:
        """Close database connection"""
        await self.engine.dispose()
