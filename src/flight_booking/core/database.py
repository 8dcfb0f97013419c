"""
Database handle and async session management

The process entry point constructs one ``Database`` and hands it to whatever
needs storage (the FastAPI app state, the seed script, test fixtures).
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

logger = logging.getLogger(__name__)

# Create declarative base for models
Base = declarative_base()

# Connection execution option marking a read-write unit of work
WRITE_TRANSACTION = "flight_booking_write"


def _configure_sqlite(engine: AsyncEngine) -> None:
    """
    Emit BEGIN ourselves so write transactions can take the lock up front.

    pysqlite defers BEGIN until the first DML statement, which lets two
    transactions read the same free seat before either writes. Write units
    of work begin IMMEDIATE, which serialises writers at transaction start;
    everything else begins DEFERRED. WAL keeps those readers from blocking
    a writer's commit.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        if conn.get_execution_options().get(WRITE_TRANSACTION):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")


@asynccontextmanager
async def write_transaction(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """
    Scoped read-write transaction: commit on normal exit, roll back on any error.

    A read transaction left open by earlier queries on the session is
    committed first, so reads and writes can share one session.
    """
    if session.in_transaction():
        await session.commit()

    async with session.begin():
        await session.connection(execution_options={WRITE_TRANSACTION: True})
        yield session


class Database:
    """Owns the async engine and the session factory"""

    def __init__(
        self,
        url: str,
        echo: bool = False,
        pool_size: int = 20,
        max_overflow: int = 40,
    ):
        self.url = url
        engine_kwargs = {"echo": echo, "pool_pre_ping": True}
        if not url.startswith("sqlite"):
            engine_kwargs.update(pool_size=pool_size, max_overflow=max_overflow)

        self.engine: AsyncEngine = create_async_engine(url, **engine_kwargs)
        if self.engine.dialect.name == "sqlite":
            _configure_sqlite(self.engine)

        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,  # Don't expire objects after commit
            autoflush=False,
        )

    async def connect(self):
        """Verify the database is reachable"""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception as e:
            raise ConnectionError(f"Error connecting to database: {e}") from e
        logger.info("Database connection successful")

    async def disconnect(self):
        await self.engine.dispose()

    async def create_all(self):
        """
        Create all tables.
        Only for development - use migrations in production.
        """
        # Import all models to register them with Base
        import flight_booking.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def drop_all(self):
        """
        Drop all tables.
        WARNING: Use only in development/testing!
        """
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_factory() as session:
            yield session
