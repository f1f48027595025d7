"""
tests.conftest

Shared fixtures: settings, a controllable clock, and a seeded member directory.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import pytest
from argon2 import PasswordHasher

from tokenkeeper.auth.resolver import MemberDirectory
from tokenkeeper.auth.service import TokenService, reset_instance
from tokenkeeper.settings import Settings

SECRET = "my-super-secret"
MEMBER_EMAIL = "test@test.test"
MEMBER_PASSWORD = "my-test-password"


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2030, 1, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def settings() -> Settings:
    return Settings(env="test", jwt_secret=SECRET, base_url="http://test/")


@pytest.fixture
def directory() -> MemberDirectory:
    # Cheap argon2 parameters keep the suite fast.
    hasher = PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)
    directory = MemberDirectory(identifier_field="email", hasher=hasher)
    directory.add_member(
        id=1,
        password=MEMBER_PASSWORD,
        attributes={"email": MEMBER_EMAIL, "first_name": "Test", "surname": "Member"},
    )
    return directory


@pytest.fixture
def service(settings: Settings, directory: MemberDirectory, clock: FakeClock) -> TokenService:
    return TokenService(settings=settings, resolver=directory, clock=clock)


@pytest.fixture(autouse=True)
def _reset_singleton() -> Iterator[None]:
    yield
    reset_instance()
