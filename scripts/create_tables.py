import asyncio
import os

import asyncpg

from app.db.postgres import create_kv_table
from app.logger import logger


async def main():
    pool = await asyncpg.create_pool(os.environ["POSTGRES_URI"])

    logger.info("creating database tables")
    await create_kv_table(pool)
    logger.info("created all required tables")
    await pool.close()


if __name__ == "__main__":
    asyncio.run(main())
