"""Async database engine and session lifecycle management.

Core functionality:
- **Engine creation**: SQLite (aiosqlite) or PostgreSQL (asyncpg); pool
  sizing and driver options only apply to PostgreSQL
- **Foreign keys on SQLite**: enabled on every new connection so the
  cascade from cities to points of interest is enforced by the database
- **Session factory**: one ``AsyncSession`` per unit of work
- **Health checks**: database connectivity validation
- **Query monitoring**: optional slow query logging with sanitized parameters

Sessions never commit on their own. Work is committed explicitly through the
repository's ``save_changes``; a session closed without it discards every
pending change.
"""

import threading
import time
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any
from weakref import WeakKeyDictionary

from loguru import logger
from sqlalchemy import event, text
from sqlalchemy.engine import Connection
from sqlalchemy.engine.interfaces import DBAPIConnection, DBAPICursor, ExecutionContext
from sqlalchemy.exc import ArgumentError, InvalidRequestError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import ConnectionPoolEntry

from cityinfo.core.config import get_settings
from cityinfo.core.context import RequestContext
from cityinfo.core.error_context import sanitize_sql_params
from cityinfo.infrastructure.constants import (
    COMMAND_TIMEOUT_SECONDS,
    POOL_RECYCLE_SECONDS,
    SLOW_QUERY_LOG_LENGTH,
)

_query_start_times: WeakKeyDictionary[ExecutionContext, float] = WeakKeyDictionary()


def _before_cursor_execute(
    _conn: Connection,
    _cursor: DBAPICursor,
    _statement: str,
    _parameters: dict[str, Any] | list[Any] | tuple[Any, ...] | None,
    context: ExecutionContext,
    _executemany: bool,
) -> None:
    """Record the query start time."""
    _query_start_times[context] = time.time()


def _after_cursor_execute(
    _conn: Connection,
    cursor: DBAPICursor,
    statement: str,
    parameters: dict[str, Any] | list[Any] | tuple[Any, ...] | None,
    context: ExecutionContext,
    executemany: bool,
) -> None:
    """Log queries slower than the configured threshold.

    Args:
        _conn: Database connection (unused).
        cursor: Database cursor.
        statement: SQL statement that was executed.
        parameters: Query parameters.
        context: SQLAlchemy execution context.
        executemany: Whether this was an executemany operation.
    """
    settings = get_settings()

    start_time = _query_start_times.pop(context, None)
    if start_time is None:
        return
    duration_ms = (time.time() - start_time) * 1000
    if duration_ms < settings.log_config.slow_query_threshold_ms:
        return

    rows_affected = getattr(cursor, "rowcount", -1)
    clean_statement = " ".join(statement.split())[:SLOW_QUERY_LOG_LENGTH]

    logger.warning(
        "Slow query detected: {}... Duration: {:.2f}ms",
        clean_statement[:100],
        duration_ms,
        query=clean_statement,
        duration_ms=round(duration_ms, 2),
        rows_affected=-1 if rows_affected is None else rows_affected,
        parameters=sanitize_sql_params(parameters),
        correlation_id=RequestContext.get_correlation_id(),
        executemany=executemany,
        threshold_ms=settings.log_config.slow_query_threshold_ms,
    )


def _enable_sqlite_foreign_keys(
    dbapi_connection: DBAPIConnection, _connection_record: ConnectionPoolEntry
) -> None:
    """Turn on foreign key enforcement for a fresh SQLite connection."""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_database_engine(database_url: str | None = None) -> AsyncEngine:
    """Create an async SQLAlchemy engine for the configured store.

    Args:
        database_url: Optional database URL. If not provided, uses the
                     configured database URL from settings.

    Returns:
        AsyncEngine: Configured async engine instance.
    """
    settings = get_settings()
    db_config = settings.database_config
    url = database_url or db_config.database_url
    is_sqlite = url.startswith("sqlite")

    engine_kwargs: dict[str, Any] = {"echo": db_config.echo}
    if not is_sqlite:
        engine_kwargs.update(
            pool_size=db_config.pool_size,
            max_overflow=db_config.max_overflow,
            pool_timeout=db_config.pool_timeout,
            pool_pre_ping=db_config.pool_pre_ping,
            pool_recycle=POOL_RECYCLE_SECONDS,
            connect_args={
                "server_settings": {"jit": "off"},
                "command_timeout": COMMAND_TIMEOUT_SECONDS,
            },
        )

    engine = create_async_engine(url, **engine_kwargs)

    if is_sqlite:
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    if settings.log_config.enable_sql_logging:
        try:
            event.listen(
                engine.sync_engine, "before_cursor_execute", _before_cursor_execute
            )
            event.listen(
                engine.sync_engine, "after_cursor_execute", _after_cursor_execute
            )
            logger.info("Registered slow query event listeners")
        except (InvalidRequestError, ArgumentError) as e:
            logger.warning(
                "Failed to register slow query event listeners: {}: {}",
                type(e).__name__,
                str(e),
            )

    logger.info(
        "Created database engine - dialect: {}, sql_logging: {}",
        engine.dialect.name,
        settings.log_config.enable_sql_logging,
    )

    return engine


class _DatabaseManager:
    """Holds the process-wide engine and session factory."""

    def __init__(self) -> None:
        self._engine: AsyncEngine | None = None
        self._async_session_factory: async_sessionmaker[AsyncSession] | None = None
        self._lock = threading.Lock()

    def get_engine(self) -> AsyncEngine:
        """Get or create the async engine instance."""
        if self._engine is None:
            with self._lock:
                if self._engine is None:
                    self._engine = create_database_engine()
        return self._engine

    def get_session_factory(self) -> async_sessionmaker[AsyncSession]:
        """Get or create the async session factory."""
        if self._async_session_factory is None:
            engine = self.get_engine()
            with self._lock:
                if self._async_session_factory is None:
                    self._async_session_factory = async_sessionmaker(
                        engine,
                        class_=AsyncSession,
                        expire_on_commit=False,
                    )
                    logger.info("Created async session factory")
        return self._async_session_factory

    async def close(self) -> None:
        """Dispose of the engine and its pooled connections."""
        if self._engine is not None:
            await self._engine.dispose()
            logger.info("Database engine disposed")
            self._engine = None
            self._async_session_factory = None

    def reset(self) -> None:
        """Forget the engine without disposing it. Used by tests."""
        self._engine = None
        self._async_session_factory = None


_db_manager = _DatabaseManager()


def get_engine() -> AsyncEngine:
    """Get or create the global async engine instance."""
    return _db_manager.get_engine()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the global async session factory."""
    return _db_manager.get_session_factory()


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Open a database session for one unit of work.

    Nothing is committed here. Uncommitted changes are rolled back when the
    block exits, including when it exits with an error.

    Yields:
        AsyncGenerator[AsyncSession]: Database session for performing operations.

    Example:
        async with get_async_session() as session:
            repository = CityInfoRepository(session)
            await repository.delete_point_of_interest(point_of_interest)
            await repository.save_changes()
    """
    async_session_factory = get_session_factory()
    async with async_session_factory() as session:
        logger.debug("Created new database session")
        try:
            yield session
        except Exception:
            await session.rollback()
            logger.debug("Database session rolled back due to error")
            raise
        finally:
            await session.close()
            logger.debug("Database session closed")


async def close_database() -> None:
    """Close the database engine during application shutdown."""
    await _db_manager.close()


async def check_database_connection() -> tuple[bool, str | None]:
    """Check if the database answers a trivial query.

    Returns:
        tuple[bool, str | None]: Whether the database is reachable and, if
            not, the error message.
    """
    try:
        engine = get_engine()
        async with engine.connect() as conn:
            result = await conn.execute(text("SELECT 1"))
            _ = result.scalar()
    except SQLAlchemyError as e:
        return False, str(e)
    else:
        return True, None
