"""FastAPI application factory."""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from taskstats.aggregation.service import TaskService
from taskstats.core.config import Settings
from taskstats.core.errors import ApiError
from taskstats.core.logging_config import setup_logging
from taskstats.db.repo import SqlTaskStore, TaskStore
from taskstats.db.session import get_engine, get_session_factory, init_db
from taskstats.models.types import ErrorResponse

logger = logging.getLogger(__name__)


def get_service(request: Request) -> TaskService:
    """Dependency to get the task service built at startup."""
    return request.app.state.task_service


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Map service errors to a JSON error body."""
    logger.warning(
        f"{request.method} {request.url.path} failed: {exc.code} ({exc.status_code}) {exc.message}"
    )
    body = ErrorResponse(code=exc.code, message=exc.message)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


def create_app(settings: Settings | None = None, store: TaskStore | None = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        settings: Runtime settings. Defaults to Settings.from_env().
        store: Optional store to use instead of the SQLite store.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = Settings.from_env()

    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        task_store = store
        engine = None
        if task_store is None:
            engine = get_engine(settings.db_path)
            init_db(engine)
            task_store = SqlTaskStore(get_session_factory(engine))
            logger.info(f"Using SQLite database at {settings.db_path}")

        # Unbounded queue, fixed thread count
        executor = ThreadPoolExecutor(
            max_workers=settings.worker_threads, thread_name_prefix="taskstats-worker"
        )
        app.state.task_service = TaskService(task_store, executor)
        try:
            yield
        finally:
            await asyncio.to_thread(executor.shutdown, True)
            if engine is not None:
                engine.dispose()

    app = FastAPI(
        title="taskstats API",
        description="Task duration records and per-task averages",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_exception_handler(ApiError, api_error_handler)

    # Include routes
    from taskstats.api.routes import tasks

    app.include_router(tasks.router, prefix="/api")

    # Health check endpoint
    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app


# Default app instance
app = create_app()
