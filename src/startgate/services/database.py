"""PostgreSQL collaborator.

A thin asyncpg pool wrapper; startup only needs it to answer a round-trip
query.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import asyncpg

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT_SECONDS = 5.0
HEALTH_CHECK_QUERY = "SELECT 1 AS health_check"


class DatabasePinger(Protocol):
    """Anything that can answer a health round-trip."""

    async def ping(self) -> bool: ...


class PostgresDatabase:
    """Lazily connected asyncpg pool."""

    def __init__(
        self,
        dsn: str,
        *,
        min_size: int = 2,
        max_size: int = 10,
        connect_timeout: float = CONNECT_TIMEOUT_SECONDS,
    ) -> None:
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self.connect_timeout = connect_timeout
        self.pool: Any = None

    async def connect(self) -> None:
        """Create the connection pool if it does not exist yet."""
        if self.pool is None:
            self.pool = await asyncpg.create_pool(
                dsn=self.dsn,
                min_size=self.min_size,
                max_size=self.max_size,
                timeout=self.connect_timeout,
            )

    async def close(self) -> None:
        """Close the pool, if one was opened."""
        if self.pool is not None:
            await self.pool.close()
            self.pool = None
            logger.info("Database connections closed gracefully")

    async def ping(self) -> bool:
        """Run a trivial query; False when the database does not answer."""
        try:
            await self.connect()
            value = await self.pool.fetchval(HEALTH_CHECK_QUERY)
        except (OSError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            logger.error("Database health check failed: %s", e)
            return False
        return value == 1
