"""Database engine and session configuration."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

# Register all models with SQLAlchemy (required for relationship resolution)
import frontdesk.models  # noqa: F401
from frontdesk.config import settings


def _use_immediate_transactions(engine: AsyncEngine) -> None:
    """Give SQLite real transactions that serialize writers.

    The sqlite3 driver defers BEGIN until the first DML statement and never
    emits it for SAVEPOINT. Turning the driver's handling off and issuing
    BEGIN IMMEDIATE ourselves makes every transaction take the write lock up
    front; concurrent writers then wait on the busy timeout instead of
    failing with "database is locked" halfway through.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_begin(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn: Connection) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(database_url: str) -> AsyncEngine:
    """Create an async engine with pool settings suited to the backend."""
    engine_args: dict[str, Any] = {
        "echo": False,  # SQL logging controlled via structlog configuration
    }
    is_sqlite = database_url.startswith("sqlite")
    if is_sqlite:
        engine_args["connect_args"] = {"timeout": settings.sqlite_busy_timeout}
    else:
        engine_args["pool_size"] = settings.db_pool_size
        engine_args["max_overflow"] = settings.db_max_overflow
        engine_args["pool_pre_ping"] = True  # Verify connections before use
        engine_args["pool_recycle"] = 300  # Recycle connections after 5 minutes

    engine = create_async_engine(database_url, **engine_args)
    if is_sqlite:
        _use_immediate_transactions(engine)
    return engine


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.database_url)

async_session_maker = build_session_maker(engine)


async def get_session() -> AsyncGenerator[AsyncSession]:
    """Dependency that provides an async database session."""
    async with async_session_maker() as session:
        yield session


async def dispose_engine() -> None:
    """Dispose of the engine and release all connections.

    Should be called during application shutdown.
    """
    await engine.dispose()
