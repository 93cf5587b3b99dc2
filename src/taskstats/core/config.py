"""Runtime configuration.

Settings are read from TASKSTATS_* environment variables with
defaults suitable for local development.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

# Default database path
DEFAULT_DB_PATH = Path("data/taskstats.db")

DEFAULT_WORKER_THREADS = 8


@dataclass(frozen=True)
class Settings:
    """Application settings."""

    db_path: Path = DEFAULT_DB_PATH
    worker_threads: int = DEFAULT_WORKER_THREADS
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Settings:
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from. Defaults to os.environ.

        Returns:
            Settings instance.

        Raises:
            ValueError: If TASKSTATS_WORKER_THREADS is not a positive integer.
        """
        env = os.environ if environ is None else environ

        worker_threads = _parse_int(
            env.get("TASKSTATS_WORKER_THREADS"), DEFAULT_WORKER_THREADS, "TASKSTATS_WORKER_THREADS"
        )
        if worker_threads < 1:
            raise ValueError(f"TASKSTATS_WORKER_THREADS must be >= 1, got {worker_threads}")

        return cls(
            db_path=Path(env.get("TASKSTATS_DB_PATH", str(DEFAULT_DB_PATH))),
            worker_threads=worker_threads,
            log_level=env.get("TASKSTATS_LOG_LEVEL", "INFO").upper(),
            host=env.get("TASKSTATS_HOST", "127.0.0.1"),
            port=_parse_int(env.get("TASKSTATS_PORT"), 8000, "TASKSTATS_PORT"),
        )


def _parse_int(raw: str | None, default: int, name: str) -> int:
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
