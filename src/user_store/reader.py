"""Read path — counting, paging, id lookup and substring search.

Every query is built with SQLAlchemy Core, so search terms and paging values
always travel as bound parameters.  Each call opens its own connection and
returns detached :class:`User` snapshots.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import ColumnElement, Select, func, or_, select

from user_store.errors import InvalidArgumentError
from user_store.gateway import ConnectionGateway, translate_errors
from user_store.models import User
from user_store.schema import users_table

logger = logging.getLogger(__name__)

_c = users_table.c


def _to_user(row) -> User:  # noqa: ANN001
    # Rows come from storage as they are; no re-validation on read.
    return User.model_construct(
        id=row.id,
        first_name=row.firstname,
        last_name=row.lastname,
        email=row.email,
    )


def _require_term(term: str | None) -> str:
    if term is None or not term.strip():
        raise InvalidArgumentError("Search term must not be blank")
    return term


def _contains(column: ColumnElement, term: str) -> ColumnElement[bool]:
    """Case-insensitive ``%term%`` match; LIKE wildcards in *term* are literal."""
    return column.icontains(term, autoescape=True)


class UserReader:
    """Parameterized read queries against ``users``."""

    def __init__(self, gateway: ConnectionGateway) -> None:
        self._gateway = gateway

    async def count_users(self) -> int:
        stmt = select(func.count()).select_from(users_table)
        with translate_errors("counting users"):
            async with self._gateway.connect() as conn:
                result = await conn.execute(stmt)
                return int(result.scalar_one())

    async def list_users(self, limit: int = 100, offset: int = 0) -> list[User]:
        """Return up to *limit* users ordered by id, skipping *offset*."""
        if limit < 0 or offset < 0:
            raise InvalidArgumentError(
                f"limit and offset must be non-negative (got {limit}, {offset})"
            )
        stmt = select(users_table).order_by(_c.id).limit(limit).offset(offset)
        return await self._fetch(stmt, "listing users")

    async def get_user_by_id(self, user_id: int) -> User | None:
        """Return the user with *user_id*, or ``None`` if there is none."""
        stmt = select(users_table).where(_c.id == user_id)
        with translate_errors(f"fetching user {user_id}"):
            async with self._gateway.connect() as conn:
                row = (await conn.execute(stmt)).first()
        return _to_user(row) if row is not None else None

    async def search_by_first_name(self, term: str) -> list[User]:
        term = _require_term(term)
        return await self._search(
            _contains(_c.firstname, term),
            (_c.firstname, _c.lastname, _c.id),
            "searching users by first name",
        )

    async def search_by_last_name(self, term: str) -> list[User]:
        term = _require_term(term)
        return await self._search(
            _contains(_c.lastname, term),
            (_c.lastname, _c.firstname, _c.id),
            "searching users by last name",
        )

    async def search_by_email(self, term: str) -> list[User]:
        term = _require_term(term)
        return await self._search(
            _contains(_c.email, term),
            (_c.email, _c.id),
            "searching users by email",
        )

    async def search(self, term: str) -> list[User]:
        """Match *term* against first name, last name or email."""
        term = _require_term(term)
        return await self._search(
            or_(
                _contains(_c.firstname, term),
                _contains(_c.lastname, term),
                _contains(_c.email, term),
            ),
            (_c.firstname, _c.lastname, _c.id),
            "searching users",
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _search(
        self,
        condition: ColumnElement[bool],
        order_by: Sequence[ColumnElement],
        description: str,
    ) -> list[User]:
        stmt = select(users_table).where(condition).order_by(*order_by)
        return await self._fetch(stmt, description)

    async def _fetch(self, stmt: Select, description: str) -> list[User]:
        with translate_errors(description):
            async with self._gateway.connect() as conn:
                result = await conn.execute(stmt)
                users = [_to_user(row) for row in result]
        logger.debug("%s returned %d rows", description, len(users))
        return users
