"""Bulk writer — stream the whole batch through the bulk-loading protocol.

On PostgreSQL (asyncpg driver) rows are streamed with binary
``COPY users (firstname, lastname, email) FROM STDIN``.  COPY is a single
statement: either every streamed row lands or the import is aborted and
nothing is visible, so no explicit transaction is opened around it.

Other dialects have no COPY; there the frame is written with one
``executemany`` inside a single transaction, which keeps the same
all-or-nothing outcome.
"""

from __future__ import annotations

import logging

import pandas as pd
from sqlalchemy import insert

from user_store.gateway import translate_errors
from user_store.models import User
from user_store.registry import register_writer
from user_store.schema import COLUMN_MAP, users_table
from user_store.writers.base import BaseWriter

logger = logging.getLogger(__name__)


@register_writer("bulk")
class BulkWriter(BaseWriter):
    """Load a batch in one bulk operation.  Returns the number of rows."""

    async def _write(self, users: list[User]) -> int:
        frame = self.to_frame(users)

        with translate_errors("bulk inserting users"):
            if self._supports_copy():
                await self._copy(frame)
            else:
                await self._executemany(frame)

        logger.info(
            "%s: loaded %d users into %r (dialect=%s)",
            self.name,
            len(frame),
            users_table.name,
            self._gateway.dialect_name,
        )
        return len(frame)

    def to_frame(self, users: list[User]) -> pd.DataFrame:
        """Tabulate *users* with one column per table column."""
        return pd.DataFrame(
            [self._to_row(user) for user in users],
            columns=list(COLUMN_MAP.values()),
            dtype=object,
        )

    def _supports_copy(self) -> bool:
        return (
            self._gateway.dialect_name == "postgresql"
            and self._gateway.driver_name == "asyncpg"
        )

    async def _copy(self, frame: pd.DataFrame) -> None:
        async with self._gateway.connect() as conn:
            raw = await conn.get_raw_connection()
            status = await raw.driver_connection.copy_records_to_table(
                users_table.name,
                records=frame.itertuples(index=False, name=None),
                columns=list(frame.columns),
            )
        logger.debug("%s: COPY finished with status %r", self.name, status)

    async def _executemany(self, frame: pd.DataFrame) -> None:
        records = frame.to_dict(orient="records")
        async with self._gateway.begin() as conn:
            await conn.execute(insert(users_table), records)
