#!/usr/bin/env python3
"""Smoke test for the taskstats API.

Runs the app in-process against a throwaway SQLite file and checks
the create/average round trip.

Usage:
    python scripts/smoke_demo.py

Exit codes:
    0: All checks passed
    1: Some checks failed
"""

from __future__ import annotations

import sys
import tempfile
from pathlib import Path

from fastapi.testclient import TestClient

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from taskstats.api.app import create_app  # noqa: E402
from taskstats.core.config import Settings  # noqa: E402


def check_create(client: TestClient) -> bool:
    """Check that POST returns the persisted record."""
    ok = True
    for duration in (10, 20):
        response = client.post("/api/v1/task", json={"taskId": "t1", "duration": duration})
        if response.status_code != 200 or response.json().get("id") is None:
            print(f"FAIL: create t1={duration}: {response.status_code} {response.text}")
            ok = False
        else:
            print(f"OK: created t1={duration} as id {response.json()['id']}")
    return ok


def check_average(client: TestClient) -> bool:
    """Check that GET returns the truncated mean."""
    response = client.get("/api/v1/task/t1")
    data = response.json()
    if response.status_code != 200 or data.get("duration") != 15 or data.get("taskId") != "t1":
        print(f"FAIL: average for t1: {response.status_code} {data}")
        return False
    print(f"OK: average for t1 is {data['duration']}")
    return True


def check_unknown(client: TestClient) -> bool:
    """Check that an unknown id averages to zero."""
    data = client.get("/api/v1/task/does-not-exist").json()
    if data.get("duration") != 0:
        print(f"FAIL: unknown id returned {data}")
        return False
    print("OK: unknown id averages to 0")
    return True


def main() -> int:
    with tempfile.TemporaryDirectory() as tmp:
        settings = Settings(db_path=Path(tmp) / "smoke.db", worker_threads=2)
        with TestClient(create_app(settings)) as client:
            results = [check_create(client), check_average(client), check_unknown(client)]

    if all(results):
        print("All checks passed")
        return 0
    print("Some checks failed")
    return 1


if __name__ == "__main__":
    sys.exit(main())
