"""
ChoreoNotes Backend — Database Handle and Session Management
=============================================================

What:  Async SQLAlchemy engine + session factory wrapped in a `Database`
       handle, the declarative `Base`, and the per-request session dependency.
How:   `create_app()` constructs one `Database` and stores it on
       `app.state.database`; `get_db_session` opens a session per request that
       commits on success and rolls back on error. Nothing connects at import.
Who:   Routes receive sessions through FastAPI's dependency injection and hand
       them to the catalog services at construction time.

Connection Pooling (PostgreSQL):
    pool_size / max_overflow come from settings; pool_pre_ping validates
    connections before use; pool_recycle=3600 recycles hour-old connections.
    SQLite URLs (tests, local experiments) skip the pool arguments and get
    foreign keys switched on for every connection so ON DELETE CASCADE works.
"""

from typing import AsyncGenerator, Optional

from fastapi import Request
from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from choreonotes.config import settings


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Shares a single metadata object used by Alembic and by the test suite's
    `create_all`.
    """
    pass


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores REFERENCES clauses unless this pragma is set per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Database:
    """
    Storage collaborator handle: owns the engine (connection pool) and the
    session factory.

    Lifecycle:
        1. Built once by the process entry point (`create_app`)
        2. `session()` hands out AsyncSession instances per request
        3. `dispose()` closes pooled connections on shutdown
    """

    def __init__(
        self,
        url: str,
        *,
        pool_size: Optional[int] = None,
        max_overflow: Optional[int] = None,
        pool_pre_ping: bool = True,
        echo: bool = False,
    ):
        self.url = make_url(url)
        engine_kwargs = {"echo": echo}

        if self.is_sqlite:
            # SQLite pools do not accept sizing arguments
            engine_kwargs["connect_args"] = {"timeout": 30}
        else:
            engine_kwargs.update(
                pool_size=pool_size if pool_size is not None else settings.db_pool_size,
                max_overflow=max_overflow if max_overflow is not None else settings.db_max_overflow,
                pool_pre_ping=pool_pre_ping,
                pool_recycle=3600,
            )

        self.engine: AsyncEngine = create_async_engine(self.url, **engine_kwargs)
        if self.is_sqlite:
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

        # expire_on_commit=False: attributes stay readable after commit for
        # response serialization
        self.session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls) -> "Database":
        """Builds the handle from the global settings object."""
        return cls(
            settings.database_url,
            pool_pre_ping=settings.db_pool_pre_ping,
            echo=settings.log_level == "DEBUG",
        )

    @property
    def is_sqlite(self) -> bool:
        return self.url.get_backend_name() == "sqlite"

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def ping(self) -> None:
        """Executes SELECT 1; raises whatever the driver raises on failure."""
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def create_all(self) -> None:
        """Creates every table registered on `Base` (tests and local SQLite)."""
        # Import models so they register with Base.metadata
        import choreonotes.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        """Gracefully closes all connections in the pool."""
        await self.engine.dispose()


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Opens a session from the app's Database handle
        2. Yields it to the route handler (and to the catalogs it builds)
        3. On success: commits the transaction
        4. On error: rolls back, then re-raises for the global error handlers
        5. Always: closes the session (returns connection to pool)

    All statements a request issues therefore share one transaction, e.g. a
    composition insert and the duration recompute that follows it.
    """
    database: Database = request.app.state.database
    async with database.session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
