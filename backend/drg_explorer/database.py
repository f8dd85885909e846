"""Database engine, session factory and the FastAPI session dependency."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, Request
from sqlalchemy import text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from drg_explorer.errors import StoreUnavailableError


class Base(DeclarativeBase):
    """Declarative base for all models."""


def sqlite_path(database_url: str) -> Path | None:
    """Return the file backing a SQLite URL, or None for other backends and in-memory DBs."""
    url = make_url(database_url)
    if url.get_backend_name() != "sqlite":
        return None
    if not url.database or url.database == ":memory:":
        return None
    return Path(url.database)


class StoreClient:
    """Owner of the engine and session factory for the record store.

    Built once per process (API lifespan or import script) and handed to
    whatever needs a session. Nothing in the package reaches for a global
    engine.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self.session_maker = async_sessionmaker(
            engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_url(
        cls,
        database_url: str,
        *,
        require_existing: bool = False,
        echo: bool = False,
    ) -> StoreClient:
        """Create a client for the given SQLAlchemy async URL.

        Args:
            database_url: e.g. ``sqlite+aiosqlite:///data/medicare_ip.db``.
            require_existing: Fail instead of silently creating an empty
                SQLite file when the database file is missing.
            echo: Log emitted SQL.

        Raises:
            StoreUnavailableError: The SQLite file is required but absent,
                or the URL cannot be turned into an engine.
        """
        db_file = sqlite_path(database_url)
        if require_existing and db_file is not None and not db_file.exists():
            raise StoreUnavailableError(
                f"SQLite DB not found. Expected at {db_file}. "
                "Run the import script to create it."
            )
        if db_file is not None:
            db_file.parent.mkdir(parents=True, exist_ok=True)

        try:
            engine = create_async_engine(database_url, echo=echo)
        except (SQLAlchemyError, ImportError) as e:
            raise StoreUnavailableError(f"Cannot open record store: {e}") from e
        return cls(engine)

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Yield a session bound to this store."""
        async with self.session_maker() as session:
            yield session

    async def verify(self) -> None:
        """Run a trivial query against the store.

        Raises:
            StoreUnavailableError: The store did not answer.
        """
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            raise StoreUnavailableError(f"Record store unavailable: {e}") from e

    async def create_schema(self) -> None:
        """Create any missing tables."""
        # Import models so they register with Base.metadata
        import drg_explorer.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()


def get_store(request: Request) -> StoreClient:
    """Return the process-wide store client created in the app lifespan."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise StoreUnavailableError("Record store is not initialised")
    return store


async def get_db(store: StoreClient = Depends(get_store)) -> AsyncIterator[AsyncSession]:
    """Yield a read session for the duration of a request."""
    async with store.session() as session:
        yield session
