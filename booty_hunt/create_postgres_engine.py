from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from booty_hunt.load_settings import db_name, host, password, port, store_busy_timeout, user

POSTGRES_DATABASE_URL = (
    f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{db_name}"
)


def create_postgres_engine(url: str = POSTGRES_DATABASE_URL) -> AsyncEngine:
    # One connection only; the Store lock decides who may use it.
    return create_async_engine(
        url,
        pool_size=1,
        max_overflow=0,
        pool_timeout=store_busy_timeout,
        pool_pre_ping=True,
    )
