"""Pydantic models for the taskstats API.

JSON field names are camelCase on the wire.
"""

from pydantic import BaseModel, ConfigDict, Field

from taskstats.models.domain import TaskEntity

# Largest value the store can hold in a signed 64-bit INTEGER column
MAX_DURATION = 2**63 - 1


class TaskPayload(BaseModel):
    """Request body for task creation. Any supplied id is ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    task_id: str = Field(alias="taskId")
    duration: int = Field(strict=True, ge=0, le=MAX_DURATION)

    def to_entity(self) -> TaskEntity:
        return TaskEntity(task_id=self.task_id, duration=self.duration)


class TaskResponse(BaseModel):
    """A persisted task, or an aggregate from a look-up."""

    model_config = ConfigDict(populate_by_name=True)

    id: int | None = None
    task_id: str = Field(alias="taskId")
    duration: int

    @classmethod
    def from_entity(cls, entity: TaskEntity) -> "TaskResponse":
        return cls(id=entity.id, task_id=entity.task_id, duration=entity.duration)


class ErrorResponse(BaseModel):
    """Error body returned for mapped service errors."""

    code: str
    message: str
