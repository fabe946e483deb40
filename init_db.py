"""Initialize database tables and optionally run a first catalog sync"""
import asyncio
import sys

from catalog.database import engine, create_tables, AsyncSessionLocal
from catalog.services.sync_service import get_sync_service


async def init(sync: bool = False):
    await create_tables()
    print("Database tables created successfully.")

    if sync:
        async with AsyncSessionLocal() as session:
            result = await get_sync_service().run_sync(session, trigger="init_db")
        print(f"Initial sync: {result.imported} imported, {result.updated} updated, {result.failed} failed")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(init(sync="--sync" in sys.argv))
