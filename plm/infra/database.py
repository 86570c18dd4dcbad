"""Async database handle with explicit lifecycle.

Provides:
- ``Database``: owns the async engine and session factory; constructed at
  process start and disposed at shutdown, then passed to whoever needs it
- Transaction scope that commits on success and rolls back on any exception
- Whole-transaction retry on serialization failures and deadlocks
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, TypeVar

from sqlalchemy import event, text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from plm.config import Settings
from plm.infra.audit import attach_statement_audit
from plm.infra.logging import get_logger
from plm.models.base import Base

logger = get_logger(__name__)

T = TypeVar("T")

# SQLSTATEs that mean "run the whole transaction again"
RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})

# Execution option marking connections that only read
READ_ONLY_OPTION = "plm_read_only"


def is_retryable(exc: BaseException) -> bool:
    """Check whether a driver error is a serialization failure or deadlock."""
    if not isinstance(exc, DBAPIError):
        return False
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    return code in RETRYABLE_SQLSTATES


def _configure_sqlite(engine: AsyncEngine) -> None:
    """Make SQLite behave like the production store for our purposes.

    Foreign keys are enforced and every write transaction starts with
    ``BEGIN IMMEDIATE`` so concurrent writers queue on the database lock
    instead of both reading a stale total. Connections flagged
    ``read_only`` open a deferred transaction and never take the write lock.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection: Any, connection_record: Any) -> None:
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn: Any) -> None:
        if conn.get_execution_options().get(READ_ONLY_OPTION):
            conn.exec_driver_sql("BEGIN")
        else:
            conn.exec_driver_sql("BEGIN IMMEDIATE")


class Database:
    """Explicitly constructed store handle.

    Example:
        db = Database.from_settings(settings)
        async with db.transaction() as session:
            session.add(Material(name="Cotton"))
        await db.dispose()
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: int = 20,
        max_overflow: int = 0,
        pool_timeout: float = 10.0,
        isolation_level: str = "READ COMMITTED",
        serialization_retries: int = 3,
        echo: bool = False,
        audit: bool = True,
    ) -> None:
        self.url = url
        self.serialization_retries = serialization_retries
        self.is_sqlite = url.startswith("sqlite")

        options: dict[str, Any] = {"echo": echo, "pool_pre_ping": True}
        if not self.is_sqlite:
            options.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_timeout=pool_timeout,
                pool_recycle=1800,
                isolation_level=isolation_level,
            )

        logger.info(
            "Creating database engine",
            dialect=url.split(":", 1)[0],
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_timeout=pool_timeout,
        )
        self._engine: AsyncEngine = create_async_engine(url, **options)
        if self.is_sqlite:
            _configure_sqlite(self._engine)
        if audit:
            attach_statement_audit(self._engine)

        self._session_factory = async_sessionmaker(
            bind=self._engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        self._read_session_factory = async_sessionmaker(
            bind=self._engine.execution_options(**{READ_ONLY_OPTION: True}),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Build a handle from application settings."""
        return cls(
            settings.database_url,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_pool_max_overflow,
            pool_timeout=settings.db_pool_timeout_seconds,
            isolation_level=settings.db_isolation_level,
            serialization_retries=settings.db_serialization_retries,
            echo=settings.debug,
            audit=settings.audit_statements,
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @asynccontextmanager
    async def transaction(self, read_only: bool = False) -> AsyncGenerator[AsyncSession, None]:
        """Open a session inside one atomic transaction.

        Commits when the block exits normally; any exception rolls the
        transaction back and propagates unchanged. ``read_only`` sessions
        skip the SQLite write lock and must not write.
        """
        factory = self._read_session_factory if read_only else self._session_factory
        async with factory() as session:
            try:
                async with session.begin():
                    yield session
            except Exception as e:
                logger.debug(
                    "Transaction rolled back",
                    error=str(e),
                    error_type=type(e).__name__,
                )
                raise

    async def run(
        self,
        work: Callable[[AsyncSession], Awaitable[T]],
        *,
        read_only: bool = False,
    ) -> T:
        """Run ``work`` in its own transaction, retrying retryable failures.

        ``work`` must be safe to execute again from scratch; nothing it did
        in a failed attempt survives the rollback.
        """
        attempt = 1
        while True:
            try:
                async with self.transaction(read_only) as session:
                    return await work(session)
            except DBAPIError as e:
                if not is_retryable(e) or attempt >= self.serialization_retries:
                    raise
                logger.warning(
                    "Retrying transaction after serialization failure",
                    attempt=attempt,
                    max_attempts=self.serialization_retries,
                )
                attempt += 1

    async def create_all(self) -> None:
        """Create all tables (development and tests; production uses DDL scripts)."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")

    async def drop_all(self) -> None:
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)

    async def verify_connection(self) -> bool:
        """Verify database connectivity.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            async with self._engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("Database connection verified")
            return True
        except Exception as e:
            logger.error("Database connection failed", error=str(e))
            return False

    async def dispose(self) -> None:
        """Close the engine and all pooled connections.

        Call this during application shutdown.
        """
        logger.info("Closing database engine")
        await self._engine.dispose()
