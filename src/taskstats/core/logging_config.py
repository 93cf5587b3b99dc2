"""Process-wide logging for the taskstats service.

Service modules log through logging.getLogger(__name__); this module
only attaches the console output once per process. SQLAlchemy's engine
logger is held at WARNING so per-request SQL does not drown the task
and error lines.
"""

from __future__ import annotations

import logging

TASKSTATS_LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(threadName)s] %(name)s: %(message)s"

# Loggers kept quieter than the service's own level
QUIET_LOGGERS = ("sqlalchemy.engine",)


def setup_logging(level: str = "INFO") -> None:
    """Attach a console handler to the root logger.

    The thread name is included because store calls run on the
    taskstats-worker pool. Repeated calls are no-ops once any root
    handler exists (app factory called per test, uvicorn reloads).

    Args:
        level: Level name for the root logger, e.g. "DEBUG".
    """
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(TASKSTATS_LOG_FORMAT))
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
