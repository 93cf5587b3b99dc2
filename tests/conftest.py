"""Shared pytest fixtures for taskstats tests."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from taskstats.db.repo import SqlTaskStore, TaskStore
from taskstats.db.schema import Base
from taskstats.db.session import get_session_factory


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine for testing.

    StaticPool keeps one connection so executor threads see the same database.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def session(engine):
    """Create a database session for testing."""
    Session = sessionmaker(bind=engine)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def session_factory(engine):
    """Session factory bound to the in-memory engine."""
    return get_session_factory(engine)


@pytest.fixture
def store(session_factory):
    """SQL-backed task store over the in-memory engine."""
    return SqlTaskStore(session_factory)


class NullStore(TaskStore):
    """Store that returns no result from either operation."""

    def save(self, entity):
        return None

    def find_by_task_id(self, task_id):
        return None


@pytest.fixture
def null_store():
    """Store whose save and query both yield None."""
    return NullStore()
