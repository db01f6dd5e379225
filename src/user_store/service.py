"""Store service — the orchestrator behind the CLI.

Wires configuration, generator and repository together, runs the startup
checks and owns the policy that picks an insertion strategy for a batch.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from user_store.errors import InvalidArgumentError, SetupError
from user_store.generator import UserGenerator
from user_store.models import StoreConfig, User
from user_store.repository import UserRepository

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("any", "first_name", "last_name", "email")


@dataclass(frozen=True)
class InsertReport:
    strategy: str
    inserted: int
    elapsed_ms: float
    total: int


def choose_strategy(count: int, threshold: int, use_bulk: bool) -> str:
    """Bulk only when the batch reaches *threshold* and the operator opted in."""
    if use_bulk and count >= threshold:
        return "bulk"
    return "row_by_row"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


class UserStoreService:
    """Generate, store and look up users according to a :class:`StoreConfig`."""

    def __init__(
        self,
        config: StoreConfig,
        repository: UserRepository | None = None,
        generator: UserGenerator | None = None,
    ) -> None:
        self._config = config
        self.repository = repository or UserRepository.from_settings(config.database)
        self.generator = generator or UserGenerator.from_settings(config.generator)

    @classmethod
    def from_config_file(cls, config_path: str | Path | None) -> UserStoreService:
        return cls(StoreConfig.from_yaml(config_path))

    @property
    def config(self) -> StoreConfig:
        return self._config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Check connectivity, then make sure the table exists.

        Raises :class:`SetupError` if either step fails.
        """
        logger.info("Checking database connection")
        if not await self.repository.test_connection():
            raise SetupError(
                "Could not connect to the database. Check the connection URL."
            )
        await self.repository.ensure_schema()

    async def add_users(self, count: int, *, bulk: bool = False) -> InsertReport:
        """Generate *count* users and store them with the chosen strategy."""
        strategy = choose_strategy(
            count, self._config.bulk_insert.recommend_threshold, bulk
        )
        users = self.generator.generate(count)
        logger.info("Generated %d users, inserting with %r", len(users), strategy)

        started = time.perf_counter()
        await self.repository.insert(users, strategy)
        elapsed_ms = (time.perf_counter() - started) * 1000

        total = await self.repository.count_users()
        return InsertReport(
            strategy=strategy, inserted=len(users), elapsed_ms=elapsed_ms, total=total
        )

    async def search(self, term: str, field: str = "any") -> list[User]:
        """Dispatch *term* to the search matching *field*."""
        if field not in SEARCH_FIELDS:
            raise InvalidArgumentError(
                f"Unknown search field {field!r}. Available: {', '.join(SEARCH_FIELDS)}"
            )
        repo = self.repository
        if field == "first_name":
            return await repo.search_by_first_name(term)
        if field == "last_name":
            return await repo.search_by_last_name(term)
        if field == "email":
            return await repo.search_by_email(term)
        return await repo.search(term)

    async def close(self) -> None:
        await self.repository.close()
