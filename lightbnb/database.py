"""
Database connection and pool management for PostgreSQL.
Runs hand-written ``$n`` SQL through a pooled SQLAlchemy async engine over asyncpg.
"""

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy import Integer
from sqlalchemy import exc as sa_exc
from typing import Any, Dict, List, Optional, Protocol, Sequence
from lightbnb.config import Settings, get_settings
from lightbnb.utils.exceptions import (
    DataAccessError,
    ConnectionFailureError,
    ConstraintViolationError,
    MalformedQueryError,
)
import asyncio
import logging

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """
    Base class for all table definitions.
    Every LightBnB table has a serial integer primary key.
    """

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"


class QueryExecutor(Protocol):
    """Anything that can run ``$n`` SQL with positional values and return rows."""

    async def fetch(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        ...


def translate_error(error: Exception, statement: Optional[str] = None) -> DataAccessError:
    """
    Map a SQLAlchemy/driver error onto the data-access error hierarchy.

    Args:
        error: Exception raised while executing a statement
        statement: SQL text that was executed

    Returns:
        The matching DataAccessError subclass instance
    """
    orig = getattr(error, "orig", None)
    detail = str(orig) if orig is not None else str(error)

    if isinstance(error, sa_exc.IntegrityError):
        # asyncpg's own exception carries the constraint name
        cause = getattr(orig, "__cause__", None)
        constraint = getattr(cause, "constraint_name", None)
        return ConstraintViolationError(detail, statement, constraint=constraint)
    if isinstance(error, (sa_exc.ProgrammingError, sa_exc.DataError)):
        return MalformedQueryError(detail, statement)
    if isinstance(error, sa_exc.DBAPIError) and error.connection_invalidated:
        return ConnectionFailureError(detail, statement)
    if isinstance(error, (
        sa_exc.OperationalError,
        sa_exc.InterfaceError,
        sa_exc.DisconnectionError,
        sa_exc.TimeoutError,
        asyncio.TimeoutError,
        OSError,
    )):
        return ConnectionFailureError(detail, statement)
    return DataAccessError(detail, statement)


class Database:
    """
    Process-wide connection pool handle.

    Create one at startup, ``await connect()``, inject it wherever a
    QueryExecutor is needed and ``await close()`` on shutdown.
    """

    def __init__(self, settings: Optional[Settings] = None, engine: Optional[AsyncEngine] = None):
        self.settings = settings or get_settings()
        self._engine = engine
        self._in_flight = 0
        self._idle: Optional[asyncio.Event] = None

    async def connect(self) -> "Database":
        """Create the engine and its connection pool."""
        if self._engine is None:
            self._engine = create_async_engine(
                self.settings.database_url,
                echo=self.settings.echo_sql,
                # asyncpg takes $n placeholders natively
                paramstyle="numeric_dollar",
                pool_size=self.settings.pool_size,
                max_overflow=self.settings.max_overflow,
                pool_pre_ping=self.settings.pool_pre_ping,
                pool_recycle=self.settings.pool_recycle,
                pool_timeout=self.settings.pool_timeout,
                connect_args={
                    "server_settings": {
                        "application_name": self.settings.app_name.lower(),
                    }
                }
            )
            logger.info(f"Connection pool created for {self.settings.db_host}/{self.settings.db_name}")
        return self

    async def close(self) -> None:
        """
        Close the pool.
        Waits for in-flight fetch() calls to finish, then closes all connections.
        This should be called during shutdown.
        """
        if self._engine is not None:
            if self._in_flight:
                logger.info(f"Waiting for {self._in_flight} in-flight queries before closing")
                await self._idle.wait()
            await self._engine.dispose()
            self._engine = None
            logger.info("Database connections closed")

    async def __aenter__(self) -> "Database":
        return await self.connect()

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not connected; call connect() first")
        return self._engine

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    async def fetch(self, sql: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """
        Execute one statement on a pooled connection and return its rows.

        The statement runs in its own transaction, committed on success.

        Args:
            sql: SQL text with $1..$n placeholders
            params: Values for the placeholders, in order

        Returns:
            List of rows as dictionaries keyed by column name

        Raises:
            DataAccessError: Translated driver or pool error
        """
        engine = self.engine
        self._begin_query()
        try:
            async with engine.begin() as conn:
                if params:
                    result = await conn.exec_driver_sql(sql, tuple(params))
                else:
                    result = await conn.exec_driver_sql(sql)
                if not result.returns_rows:
                    return []
                rows = [dict(row) for row in result.mappings().all()]
        except (sa_exc.SQLAlchemyError, asyncio.TimeoutError, OSError) as e:
            error = translate_error(e, sql)
            logger.error(f"Query failed [{error.error_code}]: {error.detail}")
            raise error from e
        finally:
            self._end_query()

        logger.debug(f"Query returned {len(rows)} rows")
        return rows

    def _begin_query(self) -> None:
        if self._idle is None:
            self._idle = asyncio.Event()
        self._in_flight += 1
        self._idle.clear()

    def _end_query(self) -> None:
        self._in_flight -= 1
        if self._in_flight == 0:
            self._idle.set()

    async def check_connection(self) -> bool:
        """
        Test database connectivity.
        Returns True if connection is successful, False otherwise.
        """
        try:
            await self.fetch("SELECT 1")
            logger.info("Database connection successful")
            return True
        except DataAccessError as e:
            logger.error(f"Database connection failed: {e}")
            return False

    def pool_status(self) -> Dict[str, Any]:
        """Get connection pool counters for monitoring."""
        pool = self.engine.pool
        return {
            "pool_size": pool.size(),
            "checked_in_connections": pool.checkedin(),
            "checked_out_connections": pool.checkedout(),
            "overflow_connections": pool.overflow(),
        }

    async def create_tables(self) -> None:
        """Create all LightBnB tables that do not exist yet."""
        import lightbnb.models  # noqa: F401  registers the tables on Base.metadata

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created successfully")

    async def drop_tables(self) -> None:
        """
        Drop all LightBnB tables.
        This should only be used in testing or development.
        """
        if self.settings.is_production:
            raise RuntimeError("Cannot drop tables in production environment")

        import lightbnb.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.info("Database tables dropped successfully")
