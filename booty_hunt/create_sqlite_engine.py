import pathlib

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from booty_hunt.load_settings import database_path, store_busy_timeout


def create_sqlite_engine(path: str = database_path) -> AsyncEngine:
    """Create an engine holding exactly one SQLite connection.

    Args:
        path (str): Database file, or ":memory:" for a throwaway store

    Returns:
        AsyncEngine: Engine backed by a single static connection
    """
    if path == ":memory:":
        sqlite_url = "sqlite+aiosqlite:///:memory:"
    else:
        sqlite_url = f"sqlite+aiosqlite:///{pathlib.Path(path).resolve()}"

    engine = create_async_engine(
        url=sqlite_url,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        if path != ":memory:":
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute(f"PRAGMA busy_timeout={int(store_busy_timeout * 1000)}")
        cursor.close()

    return engine
