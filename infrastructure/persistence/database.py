from contextlib import asynccontextmanager

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from infrastructure.persistence.models.spreads import Base

# Seconds a SQLite connection waits on a locked database file before failing
SQLITE_BUSY_TIMEOUT_SECONDS = 15


class Database:
    """Async engine plus a unit-of-work session for the spread tables."""

    def __init__(self, db_url: str, echo: bool = False):
        connect_args = {}
        if make_url(db_url).get_backend_name() == 'sqlite':
            connect_args['timeout'] = SQLITE_BUSY_TIMEOUT_SECONDS

        self.engine = create_async_engine(db_url, echo=echo, connect_args=connect_args)
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            autoflush=True,
            expire_on_commit=False
        )

    async def create_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_tables(self) -> None:
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def close(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self):
        """Yield a session that commits when the block exits cleanly and rolls back otherwise."""
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
