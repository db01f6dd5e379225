"""Base writer interface.

Writers are the insertion strategies of the store.  Each one receives the
shared :class:`ConnectionGateway` and persists a non-empty batch of
:class:`User` records as a single all-or-nothing unit.
"""

from __future__ import annotations

import abc
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from user_store.errors import InvalidArgumentError
from user_store.gateway import ConnectionGateway
from user_store.models import User
from user_store.schema import COLUMN_MAP


class BaseWriter(abc.ABC):
    """Persist a batch of users through one connection."""

    def __init__(self, gateway: ConnectionGateway) -> None:
        self._gateway = gateway

    @property
    def name(self) -> str:
        return self.__class__.__name__

    async def write(self, users: Sequence[User] | None) -> Any:
        """Validate the batch, then hand it to :meth:`_write`."""
        self.validate(users)
        return await self._write(list(users))

    def validate(self, users: Sequence[User] | None) -> None:
        """Reject ``None``, empty batches and invalid records before any I/O.

        Records are re-checked because ``User.model_construct`` skips
        validation.
        """
        if not users:
            raise InvalidArgumentError("User batch must not be empty")
        for position, user in enumerate(users):
            try:
                User.model_validate(dict(user))
            except ValidationError as exc:
                raise InvalidArgumentError(
                    f"User at position {position} is invalid: {exc}"
                ) from exc

    @abc.abstractmethod
    async def _write(self, users: list[User]) -> Any:
        """Write *users*; the batch is guaranteed non-empty."""
        ...

    @staticmethod
    def _to_row(user: User) -> dict[str, Any]:
        """Map model fields onto table columns."""
        return {column: getattr(user, field) for field, column in COLUMN_MAP.items()}
