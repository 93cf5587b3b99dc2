"""Task creation and average-duration look-up.

Store calls are blocking, so each operation is submitted to an
executor and awaited. No ordering is guaranteed between concurrent
calls: a look-up racing a create may or may not see the new row.

Domain logic is pure - database operations go through the store.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from concurrent.futures import Executor
from typing import Callable, Iterable, TypeVar

from taskstats.core.errors import SaveError, TasksUnavailableError
from taskstats.db.repo import TaskStore
from taskstats.models.domain import TaskEntity

logger = logging.getLogger(__name__)

T = TypeVar("T")


def average_duration(rows: Iterable[TaskEntity]) -> TaskEntity:
    """Aggregate rows into a single transient task.

    Pure function - no database access.

    The returned task_id is taken from the last row visited, so it
    depends on iteration order (the SQL store yields insertion order).
    The average uses integer division; durations are non-negative so
    this truncates.

    Args:
        rows: Matched task rows.

    Returns:
        TaskEntity with id=None, the last task_id ("" when empty) and
        the mean duration (0 when empty).
    """
    total = 0
    count = 0
    found_task_id = ""
    for row in rows:
        total += row.duration
        count += 1
        found_task_id = row.task_id

    average = total // count if count else 0
    return TaskEntity(task_id=found_task_id, duration=average)


class TaskService:
    """Create tasks and compute per-task_id average durations."""

    def __init__(self, store: TaskStore, executor: Executor | None = None):
        """Initialize service.

        Args:
            store: Persistence gateway.
            executor: Pool for blocking store calls. None uses the
                event loop's default executor.
        """
        self.store = store
        self.executor = executor

    async def _run(self, fn: Callable[..., T], *args) -> T:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, functools.partial(fn, *args))

    async def create(self, task: TaskEntity) -> TaskEntity:
        """Persist a task.

        Args:
            task: Task to save. Its id is ignored.

        Returns:
            The persisted task, unchanged.

        Raises:
            SaveError: If the store returns no record.
            StorageError: If the store rejects the write.
        """
        saved = await self._run(self.store.save, task)
        if saved is None:
            logger.warning(f"Failed creating task for task_id={task.task_id!r}")
            raise SaveError()
        return saved

    async def find_by_task_id(self, task_id: str) -> TaskEntity:
        """Average the durations of all tasks sharing task_id.

        Args:
            task_id: Grouping key to look up.

        Returns:
            Aggregate TaskEntity. Zero matches give task_id="" and
            duration=0.

        Raises:
            TasksUnavailableError: If the store returns no result.
        """
        rows = await self._run(self.store.find_by_task_id, task_id)
        if rows is None:
            logger.warning(f"No result from store for task_id={task_id!r}")
            raise TasksUnavailableError(task_id)

        result = average_duration(rows)
        logger.debug(f"Aggregated {len(rows)} rows for task_id={task_id!r}: {result.duration}")
        return result
