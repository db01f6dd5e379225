"""Shared fixtures for the test suite."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from sqlalchemy import create_engine, text

from user_store.models import DATABASE_URL_ENV, User
from user_store.repository import UserRepository


def sqlite_url(path: Path) -> str:
    return f"sqlite+aiosqlite:///{path}"


@pytest.fixture(autouse=True)
def _no_database_url_override(monkeypatch):
    """Keep a developer's USER_STORE_DATABASE_URL out of the tests."""
    monkeypatch.delenv(DATABASE_URL_ENV, raising=False)


@pytest.fixture()
def db_url(tmp_path: Path) -> str:
    return sqlite_url(tmp_path / "test.db")


@pytest.fixture()
def unreachable_url(tmp_path: Path) -> str:
    """A SQLite URL whose parent directory does not exist."""
    return sqlite_url(tmp_path / "missing" / "dir" / "test.db")


@pytest.fixture()
def repo(db_url: str) -> UserRepository:
    """Repository over a fresh file-based SQLite database with the table created."""
    repository = UserRepository(db_url)
    asyncio.run(repository.ensure_schema())
    return repository


@pytest.fixture()
def sample_users() -> list[User]:
    return [
        User(first_name="Olena", last_name="Ivanenko", email="olena@test.ua"),
        User(first_name="Petro", last_name="Ivanenko", email="petro@test.ua"),
        User(first_name="Andrii", last_name="Shevchenko", email="andrii.s@mail.com"),
        User(first_name="Iryna", last_name="Kovalenko", email="iryna.k@mail.com"),
    ]


REJECTED_LAST_NAME = "Rejected"


def execute_sync(async_url: str, *statements: str) -> None:
    """Run raw SQL through a plain (sync) SQLite engine."""
    engine = create_engine(async_url.replace("sqlite+aiosqlite", "sqlite"))
    with engine.begin() as conn:
        for statement in statements:
            conn.execute(text(statement))
    engine.dispose()


@pytest.fixture()
def rejecting_repo(repo: UserRepository, db_url: str) -> UserRepository:
    """Repository whose table refuses rows with last name ``Rejected``.

    The rows are valid ``User`` records, so the failure happens in storage.
    """
    execute_sync(
        db_url,
        f"CREATE TRIGGER reject_users BEFORE INSERT ON users "
        f"WHEN NEW.lastname = '{REJECTED_LAST_NAME}' "
        f"BEGIN SELECT RAISE(ABORT, 'row rejected'); END",
    )
    return repo


@pytest.fixture()
def run_sql(db_url: str):
    """Return a callable that runs raw SQL statements against *db_url*."""

    def _run(*statements: str) -> None:
        execute_sync(db_url, *statements)

    return _run
