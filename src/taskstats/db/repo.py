"""Repository pattern for task persistence.

Encapsulates all SQLAlchemy queries, keeping aggregation logic pure.
Returns domain models (not SQLAlchemy entities) to external callers.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from taskstats.core.errors import StorageError
from taskstats.db.schema import TaskRecord
from taskstats.db.session import session_scope
from taskstats.models.domain import TaskEntity

logger = logging.getLogger(__name__)

DbSession = Session


def _record_to_entity(record: TaskRecord) -> TaskEntity:
    """Convert SQLAlchemy TaskRecord to domain entity."""
    return TaskEntity(
        id=record.id,
        task_id=record.task_id,
        duration=record.duration,
    )


# ============================================================================
# Session-level queries
# ============================================================================


def create_task(session: DbSession, entity: TaskEntity) -> TaskEntity:
    """Insert a task row and return it with its assigned id.

    Any id on the incoming entity is ignored.
    """
    record = TaskRecord(task_id=entity.task_id, duration=entity.duration)
    session.add(record)
    session.flush()
    return _record_to_entity(record)


def get_tasks_by_task_id(session: DbSession, task_id: str) -> list[TaskEntity]:
    """Get all rows with an exactly matching task_id, oldest first."""
    stmt = select(TaskRecord).where(TaskRecord.task_id == task_id).order_by(TaskRecord.id)
    return [_record_to_entity(r) for r in session.scalars(stmt)]


# ============================================================================
# Store interface
# ============================================================================


class TaskStore(ABC):
    """Storage interface for task records: insert and query by task_id."""

    @abstractmethod
    def save(self, entity: TaskEntity) -> TaskEntity | None:
        """Persist one record.

        Args:
            entity: Record to persist. Its id is ignored.

        Returns:
            The persisted record with its surrogate key assigned.

        Raises:
            StorageError: If the store rejects the write.
        """
        pass

    @abstractmethod
    def find_by_task_id(self, task_id: str) -> list[TaskEntity] | None:
        """Find all records whose task_id matches exactly.

        Args:
            task_id: Grouping key, compared case-sensitively.

        Returns:
            Matching records in insertion order; empty when none match.
        """
        pass


class SqlTaskStore(TaskStore):
    """TaskStore backed by SQLAlchemy.

    Each call runs in its own session, so one instance can be shared
    across worker threads.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def save(self, entity: TaskEntity) -> TaskEntity | None:
        try:
            with session_scope(self._session_factory) as session:
                return create_task(session, entity)
        except (SQLAlchemyError, OverflowError) as e:
            logger.warning(f"Task write rejected for task_id={entity.task_id!r}: {e}")
            raise StorageError("Task write rejected by store") from e

    def find_by_task_id(self, task_id: str) -> list[TaskEntity] | None:
        try:
            with session_scope(self._session_factory) as session:
                return get_tasks_by_task_id(session, task_id)
        except SQLAlchemyError as e:
            logger.warning(f"Task query failed for task_id={task_id!r}: {e}")
            raise StorageError("Task query failed") from e
