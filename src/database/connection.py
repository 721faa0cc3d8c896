"""
Database connection and pool management
"""

import asyncpg
import logging
from typing import Optional

from config.settings import DATABASE_URL, DB_POOL_MIN_SIZE, DB_POOL_MAX_SIZE, DB_COMMAND_TIMEOUT
from database.schema import SCHEMA_STATEMENTS

logger = logging.getLogger(__name__)


async def init_database(database_url: Optional[str] = None) -> asyncpg.Pool:
    """Create the connection pool and make sure the schema exists"""
    database_url = database_url or DATABASE_URL
    if not database_url:
        raise ValueError("DATABASE_URL environment variable is required")

    db_pool = await asyncpg.create_pool(
        database_url,
        min_size=DB_POOL_MIN_SIZE,
        max_size=DB_POOL_MAX_SIZE,
        command_timeout=DB_COMMAND_TIMEOUT,
        statement_cache_size=0  # Fix for pgbouncer compatibility
    )

    async with db_pool.acquire() as conn:
        await conn.fetchval("SELECT 1")
        async with conn.transaction():
            for statement in SCHEMA_STATEMENTS:
                await conn.execute(statement)

    logger.info("Database initialized successfully")
    return db_pool


async def close_database(db_pool: Optional[asyncpg.Pool]):
    """Close database connection pool"""
    if db_pool:
        await db_pool.close()
    logger.info("Database connections closed")
