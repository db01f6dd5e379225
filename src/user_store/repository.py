"""Repository facade — every boundary operation of the store in one object.

Writers and the reader share one :class:`ConnectionGateway`; the repository
itself keeps no state between calls, so concurrent callers are independent.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

# Importing the subpackage triggers @register_writer decorators
import user_store.writers  # noqa: F401

from user_store.errors import InvalidArgumentError
from user_store.gateway import ConnectionGateway
from user_store.models import DatabaseSettings, User
from user_store.reader import UserReader
from user_store.registry import get_writer
from user_store.schema import ensure_schema
from user_store.writers.base import BaseWriter

logger = logging.getLogger(__name__)


class UserRepository:
    """Data access for the ``users`` table."""

    def __init__(self, url: str, *, echo: bool = False) -> None:
        self._gateway = ConnectionGateway(url, echo=echo)
        self._reader = UserReader(self._gateway)

    @classmethod
    def from_settings(cls, settings: DatabaseSettings) -> UserRepository:
        return cls(settings.url, echo=settings.echo)

    @property
    def gateway(self) -> ConnectionGateway:
        return self._gateway

    # -- setup ---------------------------------------------------------------

    async def ensure_schema(self) -> None:
        await ensure_schema(self._gateway)

    async def test_connection(self) -> bool:
        return await self._gateway.test_connection()

    # -- write path ----------------------------------------------------------

    def writer(self, strategy: str) -> BaseWriter:
        """Instantiate the writer registered under *strategy*."""
        try:
            writer_cls = get_writer(strategy)
        except KeyError as exc:
            raise InvalidArgumentError(exc.args[0]) from None
        logger.debug("Registry resolved %r → %s", strategy, writer_cls.__name__)
        return writer_cls(self._gateway)

    async def insert(self, users: Sequence[User], strategy: str = "row_by_row"):
        return await self.writer(strategy).write(users)

    async def insert_row_by_row(self, users: Sequence[User]) -> list[int]:
        return await self.insert(users, "row_by_row")

    async def bulk_insert(self, users: Sequence[User]) -> int:
        return await self.insert(users, "bulk")

    # -- read path -----------------------------------------------------------

    async def count_users(self) -> int:
        return await self._reader.count_users()

    async def list_users(self, limit: int = 100, offset: int = 0) -> list[User]:
        return await self._reader.list_users(limit, offset)

    async def get_user_by_id(self, user_id: int) -> User | None:
        return await self._reader.get_user_by_id(user_id)

    async def search_by_first_name(self, term: str) -> list[User]:
        return await self._reader.search_by_first_name(term)

    async def search_by_last_name(self, term: str) -> list[User]:
        return await self._reader.search_by_last_name(term)

    async def search_by_email(self, term: str) -> list[User]:
        return await self._reader.search_by_email(term)

    async def search(self, term: str) -> list[User]:
        return await self._reader.search(term)

    # -- lifecycle -----------------------------------------------------------

    async def close(self) -> None:
        await self._gateway.dispose()

    async def __aenter__(self) -> UserRepository:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        await self.close()
