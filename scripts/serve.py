#!/usr/bin/env python3
"""Run the taskstats API under uvicorn.

Usage:
    python scripts/serve.py

Host, port, database path and pool size come from TASKSTATS_*
environment variables (see taskstats.core.config).
"""

from __future__ import annotations

import sys
from pathlib import Path

import uvicorn

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from taskstats.api.app import create_app  # noqa: E402
from taskstats.core.config import Settings  # noqa: E402


def main() -> None:
    settings = Settings.from_env()
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
