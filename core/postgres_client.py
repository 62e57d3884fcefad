"""
PostgreSQL Client Wrapper

Thin wrapper around an asyncpg connection pool.
Provides connection retry on startup and a transaction context manager.

Usage:
    from core.postgres_client import PostgresClient

    db = PostgresClient("order_service", dsn)
    await db.connect()

    async with db.transaction() as conn:
        await conn.execute("UPDATE ...", value)
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

import asyncpg
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

logger = logging.getLogger(__name__)


class PostgresClient:
    """
    asyncpg pool wrapper.

    Queries outside a transaction borrow a pooled connection for the
    single statement; transaction() pins one connection for the block.
    """

    def __init__(
        self,
        service_name: str,
        dsn: str,
        min_size: int = 1,
        max_size: int = 10,
    ):
        self.service_name = service_name
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self._pool: Optional[asyncpg.Pool] = None

    @retry(
        stop=stop_after_attempt(5),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((OSError, asyncpg.CannotConnectNowError)),
        reraise=True
    )
    async def _create_pool(self) -> asyncpg.Pool:
        return await asyncpg.create_pool(
            dsn=self.dsn,
            min_size=self.min_size,
            max_size=self.max_size,
        )

    async def connect(self):
        """Open the pool, retrying while the database is unreachable"""
        if self._pool is not None:
            return
        self._pool = await self._create_pool()
        logger.info(f"PostgreSQL pool ready for {self.service_name} (size {self.min_size}-{self.max_size})")

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("PostgresClient is not connected")
        return self._pool

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[asyncpg.Connection]:
        """Pinned connection inside a transaction; commits on exit, rolls back on error"""
        async with self.pool.acquire() as conn:
            async with conn.transaction():
                yield conn

    async def query(self, sql: str, *params: Any) -> List[Dict[str, Any]]:
        """Execute query and return results"""
        rows = await self.pool.fetch(sql, *params)
        return [dict(row) for row in rows]

    async def query_value(self, sql: str, *params: Any) -> Any:
        """Execute query and return the first column of the first row"""
        return await self.pool.fetchval(sql, *params)

    async def close(self):
        """Close the pool"""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None
            logger.info(f"PostgreSQL pool closed for {self.service_name}")
