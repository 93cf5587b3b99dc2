"""Database session management.

Provides the engine and session factory for SQLite access, configured
so sessions can be opened from the service's worker threads.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from taskstats.core.config import DEFAULT_DB_PATH
from taskstats.db.schema import Base

# Module-level engine cache for connection reuse
_engine_cache: dict[str, Engine] = {}


def get_engine(db_path: Path | None = None) -> Engine:
    """Get SQLAlchemy engine for the database.

    Engines are cached by resolved db_path. Subsequent calls with the
    same path return the cached engine.

    check_same_thread=False lets pooled connections be opened and
    returned from the service worker threads. Each thread checks out
    its own connection; SQLite file locking serialises writers.

    Args:
        db_path: Path to SQLite database file. Defaults to data/taskstats.db.

    Returns:
        SQLAlchemy engine instance (cached).
    """
    if db_path is None:
        db_path = DEFAULT_DB_PATH

    db_path = Path(db_path)
    cache_key = str(db_path.resolve())

    if cache_key in _engine_cache:
        return _engine_cache[cache_key]

    # Create parent directories only when creating a new engine
    db_path.parent.mkdir(parents=True, exist_ok=True)

    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"check_same_thread": False},
    )
    _engine_cache[cache_key] = engine

    return engine


def get_session_factory(engine: Engine) -> sessionmaker:
    """Build a session factory bound to an engine.

    expire_on_commit is disabled so rows stay readable after the
    unit of work commits.
    """
    return sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def session_scope(factory: sessionmaker) -> Generator[Session, None, None]:
    """Context manager for database sessions with automatic cleanup.

    Commits on successful exit, rolls back on exception, and always
    closes the session.

    Args:
        factory: Session factory to open the session from.

    Yields:
        SQLAlchemy Session instance.

    Example:
        with session_scope(factory) as session:
            session.add(record)
            # Auto-commits on exit, rolls back on exception
    """
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine) -> None:
    """Initialize database schema.

    Call this once during application startup to create tables.

    Args:
        engine: Engine to create the schema on.
    """
    Base.metadata.create_all(engine)
