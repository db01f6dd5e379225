"""Tests for idempotent schema provisioning."""

from __future__ import annotations

import asyncio

import pytest
from sqlalchemy import create_engine, inspect

from user_store.errors import SetupError
from user_store.repository import UserRepository


def _sync_url(async_url: str) -> str:
    return async_url.replace("sqlite+aiosqlite", "sqlite")


class TestEnsureSchema:
    def test_creates_users_table(self, db_url):
        asyncio.run(UserRepository(db_url).ensure_schema())

        engine = create_engine(_sync_url(db_url))
        columns = {c["name"]: c for c in inspect(engine).get_columns("users")}
        engine.dispose()

        assert set(columns) == {"id", "firstname", "lastname", "email"}
        assert columns["id"]["primary_key"]
        assert columns["firstname"]["type"].length == 50
        assert columns["lastname"]["type"].length == 50
        assert columns["email"]["type"].length == 100
        assert not columns["firstname"]["nullable"]
        assert not columns["email"]["nullable"]

    def test_second_call_keeps_existing_rows(self, repo, sample_users):
        async def scenario():
            await repo.insert_row_by_row(sample_users)
            await repo.ensure_schema()
            await repo.ensure_schema()
            return await repo.count_users()

        assert asyncio.run(scenario()) == len(sample_users)

    def test_unreachable_database_raises_setup_error(self, unreachable_url):
        repo = UserRepository(unreachable_url)
        with pytest.raises(SetupError, match="users") as exc_info:
            asyncio.run(repo.ensure_schema())
        assert exc_info.value.__cause__ is not None
