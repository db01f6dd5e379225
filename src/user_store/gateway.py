"""Connection gateway — one driver connection per logical operation.

The engine is built with ``NullPool``: every ``connect()`` / ``begin()`` opens
a fresh connection and closes it when the ``async with`` block exits, on
success and on failure alike.  No connection outlives the operation that
opened it.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Iterator
from contextlib import asynccontextmanager, contextmanager

import asyncpg
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.pool import NullPool

from user_store.errors import StorageError

logger = logging.getLogger(__name__)

STORAGE_ERRORS: tuple[type[BaseException], ...] = (
    SQLAlchemyError,
    OSError,
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
)


@contextmanager
def translate_errors(description: str) -> Iterator[None]:
    """Re-raise storage exceptions as :class:`StorageError`.

    *description* names the operation, e.g. ``"counting users"``.
    """
    try:
        yield
    except STORAGE_ERRORS as exc:
        raise StorageError(f"Failed {description}: {exc}", cause=exc) from exc


class ConnectionGateway:
    """Hand out operation-scoped connections to a single database."""

    def __init__(self, url: str, *, echo: bool = False) -> None:
        if not url:
            raise ValueError("Database url must not be empty")
        self._url = url
        self._engine: AsyncEngine = create_async_engine(
            url, echo=echo, poolclass=NullPool
        )

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @property
    def dialect_name(self) -> str:
        return self._engine.dialect.name

    @property
    def driver_name(self) -> str:
        return self._engine.dialect.driver

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[AsyncConnection]:
        """Open a connection without an explicit transaction."""
        async with self._engine.connect() as conn:
            yield conn

    @asynccontextmanager
    async def begin(self) -> AsyncIterator[AsyncConnection]:
        """Open a connection inside a transaction.

        Commits when the block exits normally, rolls back otherwise.
        """
        async with self._engine.begin() as conn:
            yield conn

    async def test_connection(self) -> bool:
        """Return ``True`` if a connection can be opened and used."""
        try:
            async with self.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except STORAGE_ERRORS as exc:
            logger.warning(
                "Connection check against %s failed: %s",
                self._engine.url.render_as_string(hide_password=True),
                exc,
            )
            return False
        return True

    async def dispose(self) -> None:
        await self._engine.dispose()
        logger.debug("Disposed SQLAlchemy engine")

    # -- context-manager support ---------------------------------------------

    async def __aenter__(self) -> ConnectionGateway:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        await self.dispose()
