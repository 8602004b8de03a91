"""Shared fixtures for the test-suite."""

from __future__ import annotations

import os
from datetime import datetime, timezone

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("APP_TIMEZONE", "UTC")
os.environ.setdefault("JOB_WORKER_ENABLED", "false")

from marketplace.infrastructure.database import (  # noqa: E402
    build_engine,
    build_session_factory,
    initialize_database,
)

FROZEN_NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def engine(tmp_path):
    """Return a fresh database file with every table created.

    Stores are called from worker threads, so each session gets its own
    connection instead of sharing a single in-memory one.
    """

    engine = build_engine(f"sqlite:///{tmp_path / 'marketplace.db'}")
    initialize_database(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def session(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture
def now() -> datetime:
    return FROZEN_NOW
