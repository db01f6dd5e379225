"""Table definition for ``users`` and idempotent schema provisioning."""

from __future__ import annotations

import logging

from sqlalchemy import Column, Integer, MetaData, String, Table

from user_store.errors import SetupError
from user_store.gateway import STORAGE_ERRORS, ConnectionGateway

logger = logging.getLogger(__name__)

metadata = MetaData()

users_table = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("firstname", String(50), nullable=False),
    Column("lastname", String(50), nullable=False),
    Column("email", String(100), nullable=False),
)

# Model field → column, in COPY / insert order.
COLUMN_MAP: dict[str, str] = {
    "first_name": "firstname",
    "last_name": "lastname",
    "email": "email",
}


async def ensure_schema(gateway: ConnectionGateway) -> None:
    """Create the ``users`` table if it does not exist yet.

    Safe to call on every start; existing rows are never touched.
    """
    try:
        async with gateway.begin() as conn:
            await conn.run_sync(metadata.create_all, checkfirst=True)
    except STORAGE_ERRORS as exc:
        raise SetupError(f"Failed creating table {users_table.name!r}: {exc}") from exc
    logger.info("Table %r is ready", users_table.name)
