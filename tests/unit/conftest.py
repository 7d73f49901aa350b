import pytest_asyncio

from infrastructure.persistence.database import Database


@pytest_asyncio.fixture
async def database(tmp_path):
    """File-backed SQLite database with fresh tables for each test."""
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'spreads.db'}")
    await db.create_tables()
    yield db
    await db.drop_tables()
    await db.close()
