import asyncio
import logging

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncEngine

import app.core.models  # noqa: F401  (registers tables on Base.metadata)
from app.db.session import Base, engine

logger = logging.getLogger(__name__)


async def ensure_tables(db_engine: AsyncEngine) -> None:
    """
    Ensure that all tables exist in the connected database.
    Missing tables are created; existing ones are left untouched.
    """
    async with db_engine.begin() as conn:
        existing = await conn.run_sync(
            lambda sync_conn: set(inspect(sync_conn).get_table_names())
        )
        missing = [t.name for t in Base.metadata.sorted_tables if t.name not in existing]
        await conn.run_sync(Base.metadata.create_all)

    if missing:
        logger.info("Created missing tables: %s", ", ".join(missing))
    else:
        logger.info("All required tables already exist in the database.")


async def main() -> None:
    logging.basicConfig(level=logging.INFO)
    await ensure_tables(engine)


if __name__ == "__main__":
    asyncio.run(main())
