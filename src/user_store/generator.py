"""Synthetic user generator backed by Faker."""

from __future__ import annotations

from faker import Faker

from user_store.errors import InvalidArgumentError
from user_store.models import GeneratorSettings, User


class UserGenerator:
    """Produce :class:`User` records with realistic names and emails.

    Generated users have no ``id``; storage assigns one on insert.
    """

    def __init__(self, locale: str = "uk_UA", seed: int | None = None) -> None:
        self._faker = Faker(locale)
        if seed is not None:
            self._faker.seed_instance(seed)

    @classmethod
    def from_settings(cls, settings: GeneratorSettings) -> UserGenerator:
        return cls(settings.locale, settings.seed)

    def generate_one(self) -> User:
        return User(
            first_name=self._faker.first_name(),
            last_name=self._faker.last_name(),
            email=self._faker.email(),
        )

    def generate(self, count: int) -> list[User]:
        if count <= 0:
            raise InvalidArgumentError(f"count must be positive (got {count})")
        return [self.generate_one() for _ in range(count)]
