"""Database configuration and session management."""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from marketplace.config import get_settings

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], Session]


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models."""


def build_engine(database_url: str) -> Engine:
    """Create an engine for ``database_url``.

    In-memory SQLite databases share a single connection so every session
    of the process sees the same tables.
    """

    if database_url.startswith("sqlite"):
        options: dict[str, object] = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url in {"sqlite://", "sqlite:///"}:
            options["poolclass"] = StaticPool
        return create_engine(database_url, **options)
    return create_engine(database_url, pool_pre_ping=True)


def build_session_factory(engine: Engine) -> sessionmaker[Session]:
    """Return a session factory bound to ``engine``."""

    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    """Return the process wide engine built from the configured URL."""

    return build_engine(get_settings().database_url)


@lru_cache(maxsize=1)
def get_session_factory() -> sessionmaker[Session]:
    """Return the process wide session factory."""

    return build_session_factory(get_engine())


def initialize_database(engine: Engine | None = None) -> None:
    """Ensure all ORM models have corresponding database tables."""

    from marketplace.infrastructure import models  # noqa: F401  # ensure models are imported

    engine = engine or get_engine()
    Base.metadata.create_all(bind=engine, checkfirst=True)
    logger.debug("Database tables ensured for %s", engine.url.render_as_string())


def dispose_engine() -> None:
    """Close pooled connections and forget the cached engine."""

    if get_engine.cache_info().currsize:
        get_engine().dispose()
    get_session_factory.cache_clear()
    get_engine.cache_clear()


def get_db() -> Generator[Session, None, None]:
    """Yield a database session and close it afterwards."""

    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


__all__ = [
    "Base",
    "SessionFactory",
    "build_engine",
    "build_session_factory",
    "dispose_engine",
    "get_db",
    "get_engine",
    "get_session_factory",
    "initialize_database",
]
