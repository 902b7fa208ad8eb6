"""Single shared channel to the persistent store.

- At most one statement sequence runs against the store at a time.
- A caller holds the channel for every step of its operation, so read-then-write
  sequences inside one ``Store.session()`` cannot interleave with other callers.
- Waiting for the channel is bounded; past the budget the caller gets StoreBusyError.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from booty_hunt.errors import StorageError, StoreBusyError
from booty_hunt.load_settings import database_path, db_backend, store_busy_timeout
from booty_hunt.models.schemas import Base


class Store:
    def __init__(self, engine: AsyncEngine, busy_timeout: float = store_busy_timeout):
        self.engine = engine
        self.busy_timeout = busy_timeout
        self._session_factory = async_sessionmaker(
            autocommit=False,
            class_=AsyncSession,
            autoflush=True,
            expire_on_commit=False,
            bind=engine,
        )
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Hold the store exclusively for one transaction.

        Commits when the block exits normally and rolls back otherwise.

        Raises:
            StoreBusyError: The channel was not free within busy_timeout seconds
            StorageError: The store rejected a statement or the commit
        """
        try:
            await asyncio.wait_for(self._lock.acquire(), timeout=self.busy_timeout)
        except asyncio.TimeoutError:
            logging.warning(f"Store busy for more than {self.busy_timeout}s")
            raise StoreBusyError("Store is busy, try again later")

        try:
            async with self._session_factory() as session:
                try:
                    async with session.begin():
                        yield session
                except SQLAlchemyError as e:
                    logging.error(f"Store operation failed: {e}")
                    raise StorageError("Database error") from e
        finally:
            self._lock.release()

    async def create_tables(self) -> None:
        """Create tables and indexes if not exists"""
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            logging.error(f"Failed to create tables: {e}")
            raise StorageError("Database error") from e

    async def dispose(self) -> None:
        await self.engine.dispose()


def create_engine() -> AsyncEngine:
    if db_backend == "postgres":
        from booty_hunt.create_postgres_engine import create_postgres_engine

        return create_postgres_engine()
    from booty_hunt.create_sqlite_engine import create_sqlite_engine

    return create_sqlite_engine(database_path)


store = Store(create_engine())


def get_store() -> Store:
    """FastAPI dependency; tests override it with a throwaway store."""
    return store
