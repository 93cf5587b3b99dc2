"""Tasks API endpoint.

POST /api/v1/task - Submit a task record
GET /api/v1/task/{taskId} - Get the average duration for a task id
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from taskstats.aggregation.service import TaskService
from taskstats.api.app import get_service
from taskstats.models.types import TaskPayload, TaskResponse

router = APIRouter()


@router.post("/v1/task", response_model=TaskResponse)
async def create_task(
    payload: TaskPayload,
    service: TaskService = Depends(get_service),
) -> TaskResponse:
    """Persist a task record.

    Args:
        payload: Task body; any id is ignored.
        service: Task service (injected).

    Returns:
        TaskResponse for the persisted record, including its id.
    """
    saved = await service.create(payload.to_entity())
    return TaskResponse.from_entity(saved)


@router.get("/v1/task/{taskId}", response_model=TaskResponse)
async def get_task(
    taskId: str,
    service: TaskService = Depends(get_service),
) -> TaskResponse:
    """Get the average duration across all records sharing taskId.

    Args:
        taskId: Grouping key, matched exactly.
        service: Task service (injected).

    Returns:
        TaskResponse aggregate with id unset. Unknown ids give
        taskId "" and duration 0.
    """
    aggregate = await service.find_by_task_id(taskId)
    return TaskResponse.from_entity(aggregate)
