"""
dashfs Database Session Management.

`Database` owns one engine and its session factory. It is constructed
explicitly and handed to whatever needs storage; the request path and the
background activity pool each get their own instance so their connection
pools never compete.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from dashfs.db.base import Base
from dashfs.engine.config import DatabaseConfig

logger = logging.getLogger("dashfs.db.session")


def _build_engine(config: DatabaseConfig) -> Engine:
    if config.url.startswith("sqlite"):
        engine = create_engine(
            config.url,
            connect_args={"check_same_thread": False},
        )

        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(
        config.url,
        pool_size=config.pool_size,
        max_overflow=config.max_overflow,
        pool_timeout=config.pool_timeout,
        pool_recycle=config.pool_recycle,
        pool_pre_ping=config.pool_pre_ping,
    )


class Database:
    """
    Engine + sessionmaker pair with a transactional scope.

    Usage:
        db = Database(DatabaseConfig(url="sqlite:///dashfs.db"))
        db.create_all()
        with db.session_scope() as session:
            session.add(node)
    """

    def __init__(self, config: Optional[DatabaseConfig] = None, engine: Optional[Engine] = None):
        self._config = config or DatabaseConfig()
        self._engine = engine or _build_engine(self._config)
        self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def url(self) -> str:
        return self._config.url

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """
        One transaction per logical operation: commit on success,
        rollback on any exception, close on every exit path.
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_all(self) -> None:
        """Create all tables. Dev/bootstrap path only."""
        # Importing the models registers them on Base.metadata
        from dashfs.db import models  # noqa: F401
        Base.metadata.create_all(self._engine)
        logger.info(f"Created tables on {self._engine.url.render_as_string(hide_password=True)}")

    def health_check(self) -> bool:
        try:
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning(f"Database health check failed: {e}")
            return False

    def dispose(self) -> None:
        """Close the connection pool."""
        self._engine.dispose()

    def __repr__(self) -> str:
        return f"<Database url='{self._engine.url.render_as_string(hide_password=True)}'>"
