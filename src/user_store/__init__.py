"""user_store — generate synthetic users and persist them in a SQL table."""

from user_store.models import User
from user_store.repository import UserRepository

__all__ = ["User", "UserRepository"]
