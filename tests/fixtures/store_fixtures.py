"""Fixtures for record stores. Both backends share the same contract suite."""

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from supportbot.config import Settings
from supportbot.db import build_engine
from supportbot.schemas.conversation import ConversationCreate
from supportbot.schemas.user import UserCreate
from supportbot.storage import MemoryStore, SqlStore


class FakeClock:
    """Strictly increasing timestamps so ordering never depends on wall time."""

    def __init__(self, start: Optional[datetime] = None, step: timedelta = timedelta(seconds=1)):
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self) -> datetime:
        self.now = self.now + self.step
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store(clock):
    return MemoryStore(clock=clock)


@pytest.fixture
def sql_store(clock):
    engine = build_engine(Settings(ENV="test", database_url="sqlite://"))
    store = SqlStore.from_engine(engine, clock=clock, create_tables=True)
    yield store
    engine.dispose()


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Each test using this fixture runs once per backend."""
    return request.getfixturevalue(f"{request.param}_store")


@pytest.fixture
def setup_user(store, faker):
    return store.create_user(
        UserCreate(
            telegram_id=str(faker.random_int(min=10_000, max=99_999)),
            first_name=faker.first_name(),
            last_name=faker.last_name(),
            username=faker.user_name(),
            language_code="en",
        )
    )


@pytest.fixture
def setup_conversation(store, setup_user):
    return store.create_conversation(
        ConversationCreate(telegram_user_id=setup_user.telegram_id)
    )
