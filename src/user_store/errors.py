"""Typed failures raised by the data-access layer.

Callers only ever see these; driver and SQLAlchemy exceptions are chained as
``__cause__`` (and kept on ``StorageError.cause``).
"""

from __future__ import annotations


class UserStoreError(Exception):
    """Base class for every failure raised by user_store."""


class SetupError(UserStoreError):
    """The store could not be prepared (schema creation, startup check)."""


class InvalidArgumentError(UserStoreError, ValueError):
    """A precondition was violated before any I/O happened."""


class StorageError(UserStoreError):
    """A storage operation failed mid-flight."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause
