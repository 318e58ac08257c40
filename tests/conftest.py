"""Pytest configuration and shared fixtures."""

import os
import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Keep tests off any developer database or Redis
os.environ.setdefault("TRADEMIND_DATABASE_URL", "sqlite://")
os.environ.setdefault("TRADEMIND_USE_REDIS", "false")

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from src.cache import MemoryCacheBackend, QueryCache  # noqa: E402
from src.db import Base  # noqa: E402

USER_ID = "user-1"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    import src.db.models  # noqa: F401  register tables
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(bind=engine, expire_on_commit=False)()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return QueryCache(MemoryCacheBackend(clock=clock), ttl_seconds=60, dedupe_seconds=2, clock=clock)


@pytest.fixture
def user_id():
    return USER_ID
