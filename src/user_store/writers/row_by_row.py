"""Row-by-row writer — one parameterized INSERT per user, one transaction."""

from __future__ import annotations

import logging

from sqlalchemy import insert

from user_store.gateway import translate_errors
from user_store.models import User
from user_store.registry import register_writer
from user_store.schema import users_table
from user_store.writers.base import BaseWriter

logger = logging.getLogger(__name__)


@register_writer("row_by_row")
class RowByRowWriter(BaseWriter):
    """Insert each user separately; commit only once all of them succeeded.

    Any failing row rolls back the whole batch.  Returns the assigned ids in
    submission order.
    """

    async def _write(self, users: list[User]) -> list[int]:
        stmt = insert(users_table)
        ids: list[int] = []

        with translate_errors("inserting users"):
            async with self._gateway.begin() as conn:
                for user in users:
                    result = await conn.execute(stmt, self._to_row(user))
                    ids.append(result.inserted_primary_key[0])

        logger.info("%s: inserted %d users in one transaction", self.name, len(ids))
        return ids
