"""Record-store handle and session management.

This module provides the SQLAlchemy 2.x ORM infrastructure used by the
record source:
- ``Base`` declarative class for the reference schema
- ``RecordStore``, an explicitly owned handle around one engine
- Health-checked reuse and transparent recreation after a disconnect

The database URL can be overridden via the DB_URL environment variable.
Defaults to sqlite:///<project_root>/database.db for local persistence.
"""

from __future__ import annotations

import logging
import os
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

logger = logging.getLogger(__name__)

__all__ = ["Base", "RecordStore", "get_database_url"]


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""


def get_database_url() -> str:
    """Return the database URL, allowing overrides via environment variable."""
    env_url = os.getenv("DB_URL")
    if env_url:
        return env_url

    project_root = Path(__file__).resolve().parents[3]
    db_path = project_root / "database.db"
    return URL.create("sqlite", database=str(db_path)).render_as_string(hide_password=False)


class RecordStore:
    """Owner of the pooled connection to the record store.

    The engine is created lazily on first use, reused while healthy,
    recreated after a disconnect is observed and disposed by :meth:`close`.
    The handle is safe to share between request threads.
    """

    def __init__(self, url: str | None = None, *, pool_size: int = 5) -> None:
        self._url = url
        self._pool_size = pool_size
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None
        self._lock = threading.Lock()
        self._closed = False

    @property
    def url(self) -> str:
        return self._url or get_database_url()

    @property
    def engine(self) -> Engine:
        return self._get_engine()

    def _get_engine(self) -> Engine:
        return self._connect()[0]

    def _connect(self) -> tuple[Engine, sessionmaker[Session]]:
        """Return the engine and its session factory, creating both if needed."""
        with self._lock:
            if self._closed:
                raise RuntimeError("RecordStore has been closed")
            if self._engine is None:
                url = self.url
                kwargs: dict = {"echo": False, "future": True, "pool_pre_ping": True}
                if not url.startswith("sqlite"):
                    kwargs["pool_size"] = self._pool_size
                self._engine = create_engine(url, **kwargs)
                self._session_factory = sessionmaker(
                    bind=self._engine,
                    autoflush=False,
                    expire_on_commit=False,
                )
                logger.debug("Created record-store engine for %s", self._engine.url)
            return self._engine, self._session_factory

    def _discard_engine(self) -> None:
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
            self._engine = None
            self._session_factory = None

    def init_schema(self) -> None:
        """Create all tables of the reference schema."""
        # Import ORM models so their metadata is registered on Base before create_all.
        from faculty_cv.data.models import category_entry, teacher  # noqa: F401

        Base.metadata.create_all(bind=self._get_engine())

    def ping(self) -> bool:
        """Check the connection, recreating the engine once if it is broken.

        Returns:
            True if the store answered, False if it is still unreachable.
        """
        for attempt in (1, 2):
            try:
                with self._get_engine().connect() as conn:
                    conn.execute(text("SELECT 1"))
                return True
            except (OperationalError, DBAPIError):
                logger.warning("Record store health check failed (attempt %d)", attempt)
                self._discard_engine()
        return False

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Provide a transactional scope around a series of operations."""
        _, factory = self._connect()
        session = factory()
        try:
            yield session
            session.commit()
        except DBAPIError as exc:
            session.rollback()
            if exc.connection_invalidated:
                logger.warning("Record store connection lost; engine will be recreated")
                self._discard_engine()
            raise
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def close(self) -> None:
        """Dispose the engine; the handle cannot be used afterwards."""
        self._discard_engine()
        with self._lock:
            self._closed = True
        logger.debug("Record store closed")
