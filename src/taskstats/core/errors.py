"""Error types surfaced by the service and mapped to HTTP responses."""

from __future__ import annotations

SAVE_ERROR_CODE = "TASK_SAVE_FAILED"
SAVE_ERROR_MESSAGE = "Failed to save task"

STORAGE_ERROR_CODE = "STORAGE_ERROR"

UNAVAILABLE_ERROR_CODE = "TASKS_UNAVAILABLE"
UNAVAILABLE_ERROR_MESSAGE = "Task records are unavailable"


class ApiError(Exception):
    """Base error carrying a stable code and an HTTP status."""

    status_code = 500

    def __init__(self, code: str, message: str, status_code: int | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class SaveError(ApiError):
    """The store accepted a save but returned no record."""

    def __init__(self) -> None:
        super().__init__(SAVE_ERROR_CODE, SAVE_ERROR_MESSAGE, status_code=500)


class StorageError(ApiError):
    """The underlying store rejected a read or write."""

    def __init__(self, message: str) -> None:
        super().__init__(STORAGE_ERROR_CODE, message, status_code=500)


class TasksUnavailableError(ApiError):
    """The store returned no result container for a query."""

    def __init__(self, task_id: str) -> None:
        super().__init__(UNAVAILABLE_ERROR_CODE, UNAVAILABLE_ERROR_MESSAGE, status_code=503)
        self.task_id = task_id
