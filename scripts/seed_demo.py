#!/usr/bin/env python3
"""Seed the database with demo task records.

Usage:
    python scripts/seed_demo.py

Writes to the database at TASKSTATS_DB_PATH (default data/taskstats.db).
Rows are appended on every run.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from taskstats.core.config import Settings  # noqa: E402
from taskstats.db import repo  # noqa: E402
from taskstats.db.session import (  # noqa: E402
    get_engine,
    get_session_factory,
    init_db,
    session_scope,
)
from taskstats.models.domain import TaskEntity  # noqa: E402

# (task_id, duration) pairs
DEMO_TASKS = [
    ("build", 120),
    ("build", 95),
    ("build", 110),
    ("deploy", 30),
    ("deploy", 45),
    ("t1", 10),
    ("t1", 20),
]


def main() -> int:
    """Seed demo rows and print the resulting counts."""
    settings = Settings.from_env()
    engine = get_engine(settings.db_path)
    init_db(engine)
    factory = get_session_factory(engine)

    with session_scope(factory) as session:
        for task_id, duration in DEMO_TASKS:
            saved = repo.create_task(session, TaskEntity(task_id=task_id, duration=duration))
            print(f"Inserted task {saved.id}: {task_id}={duration}")

    print(f"Seeded {len(DEMO_TASKS)} tasks into {settings.db_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
