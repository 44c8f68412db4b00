"""
Functions to interact with PostgreSQL database.
"""

from pathlib import Path
from typing import Optional

import asyncpg

SQL_DIR = Path(__file__).resolve().parents[2] / "sql"


async def create_kv_table(pool: asyncpg.Pool) -> None:
    async with pool.acquire() as connection:
        await connection.execute((SQL_DIR / "create_kv_store.sql").read_text())


async def get_value(pool: asyncpg.Pool, key: str) -> Optional[str]:
    async with pool.acquire() as connection:
        return await connection.fetchval("SELECT value FROM kv_store WHERE key = $1", key)


async def set_value(pool: asyncpg.Pool, key: str, value: str) -> None:
    async with pool.acquire() as connection:
        await connection.execute(
            """
            INSERT INTO kv_store (key, value)
            VALUES ($1, $2)
            ON CONFLICT (key) DO UPDATE
            SET value = $2
        """,
            key,
            value,
        )


class PostgresStore:
    """String key-value store backed by the kv_store table."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def get(self, key: str) -> Optional[str]:
        return await get_value(self.pool, key)

    async def set(self, key: str, value: str) -> None:
        await set_value(self.pool, key, value)
