"""Domain models for taskstats.

Pure Python dataclasses, independent of SQLAlchemy and pydantic.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class TaskEntity:
    """A duration record tagged with a grouping key.

    When returned from a look-up, this is a transient aggregate:
    id is None and duration is the mean over matched rows.
    """

    task_id: str
    duration: int
    id: int | None = None
