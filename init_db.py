# init_db.py
import asyncio

import prisonsphere.db
import prisonsphere.models  # noqa: F401  pylint: disable=unused-import


async def create_db_and_tables():
    """
    Creates all database tables defined in the SQLAlchemy models.
    """
    print("Attempting to create database tables...")
    async with prisonsphere.db.engine.begin() as conn:
        await conn.run_sync(prisonsphere.db.Base.metadata.create_all)
    print("Database tables created successfully (or already exist).")


if __name__ == "__main__":
    asyncio.run(create_db_and_tables())
