"""asyncpg connection pool with RLS context.

Every read runs inside a transaction where ``app.current_user_id`` is set
via ``SET LOCAL``, so Postgres Row-Level Security only ever exposes the
requesting user's period entries and cycles.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

import asyncpg

from cyclesense.config import Settings, get_settings

logger = logging.getLogger("cyclesense.db")

# Module-level connection pool — initialized once at startup
_pool: asyncpg.Pool | None = None


async def init_pool(settings: Settings | None = None) -> asyncpg.Pool:
    """Create the asyncpg connection pool.  Call once at startup."""
    global _pool
    s = settings or get_settings()
    if not s.database_url:
        raise RuntimeError("CYCLESENSE_DATABASE_URL is not configured")
    _pool = await asyncpg.create_pool(
        s.database_url,
        min_size=s.db_pool_min_size,
        max_size=s.db_pool_max_size,
        command_timeout=s.db_command_timeout,
    )
    logger.info(
        "Database pool initialized (min=%d, max=%d)",
        s.db_pool_min_size,
        s.db_pool_max_size,
    )
    return _pool


async def close_pool() -> None:
    """Drain the pool.  Call at shutdown."""
    global _pool
    if _pool:
        await _pool.close()
        _pool = None
        logger.info("Database pool closed")


def get_pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("Database pool not initialized — call init_pool() first")
    return _pool


@asynccontextmanager
async def get_connection(
    user_id: uuid.UUID | None = None,
) -> AsyncGenerator[asyncpg.Connection, None]:
    """Acquire a connection with the RLS user variable set.

    Usage::

        async with get_connection(user_id=user_id) as conn:
            rows = await conn.fetch("SELECT * FROM period_entries")
    """
    pool = get_pool()
    async with pool.acquire() as conn:
        async with conn.transaction():
            if user_id:
                await conn.execute(
                    "SELECT set_config('app.current_user_id', $1, true)", str(user_id)
                )
            yield conn


async def fetch(
    query: str,
    *args: Any,
    user_id: uuid.UUID | None = None,
) -> list[asyncpg.Record]:
    """Fetch rows with RLS context."""
    async with get_connection(user_id=user_id) as conn:
        return await conn.fetch(query, *args)
