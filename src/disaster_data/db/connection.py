"""
Engine and session helpers for the event store.

Engines are cached per database URL. Every helper accepts an explicit
URL and otherwise reads ``settings.database_url`` at call time, so the
CLI and tests can point the store anywhere without resetting state.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from disaster_data.config import settings
from disaster_data.db.models import Base

LOGGER = logging.getLogger(__name__)

_ENGINES: dict[str, Engine] = {}


def _is_memory_sqlite(database_url: str) -> bool:
    return database_url in ("sqlite://", "sqlite:///:memory:")


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """
    Create an engine with options for its backend.

    SQLite connections may be used across threads; an in-memory database
    is held on one shared connection so every session sees the same tables.
    Server databases get a sized connection pool.
    """
    options: dict[str, Any] = {"echo": echo, "pool_pre_ping": True}
    if database_url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
        if _is_memory_sqlite(database_url):
            options["poolclass"] = StaticPool
    else:
        options.update(pool_size=10, max_overflow=20)
    return create_engine(database_url, **options)


def get_engine(database_url: str | None = None) -> Engine:
    """Cached engine for a URL (default: the configured store)."""
    url = database_url or settings.database_url
    engine = _ENGINES.get(url)
    if engine is None:
        engine = _ENGINES[url] = build_engine(url)
        LOGGER.debug("Created engine for %s", engine.url.render_as_string(hide_password=True))
    return engine


def dispose_engines() -> None:
    """Close and forget every cached engine."""
    for engine in _ENGINES.values():
        engine.dispose()
    _ENGINES.clear()


@contextmanager
def session_scope(database_url: str | None = None) -> Iterator[Session]:
    """Session that commits on success and rolls back on error."""
    factory = sessionmaker(bind=get_engine(database_url), autoflush=False, expire_on_commit=False)
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(database_url: str | None = None, drop_existing: bool = False) -> None:
    """Create the store tables, dropping them first if asked."""
    engine = get_engine(database_url)
    if drop_existing:
        Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


def check_connection(database_url: str | None = None) -> bool:
    try:
        with get_engine(database_url).connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        LOGGER.warning("Database connection failed: %s", e)
        return False
    return True
