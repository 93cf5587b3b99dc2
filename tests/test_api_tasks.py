"""Tests for tasks API endpoint."""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from taskstats.aggregation.service import TaskService
from taskstats.core.config import Settings
from taskstats.core.errors import SAVE_ERROR_CODE, SAVE_ERROR_MESSAGE, UNAVAILABLE_ERROR_CODE
from taskstats.db.repo import SqlTaskStore, TaskStore
from taskstats.db.schema import Base
from taskstats.db.session import get_engine, get_session_factory


def create_test_app_and_client(store: TaskStore | None = None):
    """Create app with test database and return (client, engine)."""
    from taskstats.api.app import create_app, get_service

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    if store is None:
        store = SqlTaskStore(get_session_factory(engine))

    app = create_app()
    service = TaskService(store)

    app.dependency_overrides[get_service] = lambda: service
    client = TestClient(app, raise_server_exceptions=False)

    return client, engine


class TestCreateTaskEndpoint:
    """Test POST /api/v1/task."""

    def test_returns_200_with_persisted_record(self):
        """Returns the persisted record including its id."""
        client, _ = create_test_app_and_client()

        response = client.post("/api/v1/task", json={"taskId": "t1", "duration": 10})

        assert response.status_code == 200
        data = response.json()
        assert data["taskId"] == "t1"
        assert data["duration"] == 10
        assert isinstance(data["id"], int)

    def test_ignores_supplied_id(self):
        """An id in the body does not become the surrogate key."""
        client, _ = create_test_app_and_client()

        response = client.post("/api/v1/task", json={"id": 999, "taskId": "t1", "duration": 10})

        assert response.status_code == 200
        assert response.json()["id"] != 999

    def test_assigns_distinct_ids(self):
        """Each created record gets its own id."""
        client, _ = create_test_app_and_client()

        first = client.post("/api/v1/task", json={"taskId": "t1", "duration": 10}).json()
        second = client.post("/api/v1/task", json={"taskId": "t1", "duration": 20}).json()

        assert first["id"] != second["id"]

    def test_missing_field_returns_422(self):
        """Bodies without a duration are rejected."""
        client, _ = create_test_app_and_client()

        response = client.post("/api/v1/task", json={"taskId": "t1"})

        assert response.status_code == 422

    def test_negative_duration_returns_422(self):
        """Durations below zero never reach the store."""
        client, _ = create_test_app_and_client()

        response = client.post("/api/v1/task", json={"taskId": "t1", "duration": -1})

        assert response.status_code == 422

    def test_duration_beyond_64_bits_returns_422(self):
        """Durations the INTEGER column cannot hold are rejected as input."""
        client, _ = create_test_app_and_client()

        response = client.post("/api/v1/task", json={"taskId": "t1", "duration": 2**64})

        assert response.status_code == 422
        assert client.get("/api/v1/task/t1").json()["duration"] == 0

    def test_max_duration_accepted(self):
        """The largest signed 64-bit value is stored and averaged."""
        client, _ = create_test_app_and_client()

        response = client.post("/api/v1/task", json={"taskId": "t1", "duration": 2**63 - 1})

        assert response.status_code == 200
        assert client.get("/api/v1/task/t1").json()["duration"] == 2**63 - 1

    def test_boolean_duration_returns_422(self):
        """JSON true is not coerced to 1."""
        client, _ = create_test_app_and_client()

        response = client.post("/api/v1/task", json={"taskId": "t1", "duration": True})

        assert response.status_code == 422
        assert client.get("/api/v1/task/t1").json() == {"id": None, "taskId": "", "duration": 0}

    def test_string_duration_returns_422(self):
        """Numeric strings are not coerced."""
        client, _ = create_test_app_and_client()

        response = client.post("/api/v1/task", json={"taskId": "t1", "duration": "10"})

        assert response.status_code == 422

    def test_save_error_returns_500(self, null_store):
        """A save that yields nothing maps to the fixed save error."""
        client, _ = create_test_app_and_client(store=null_store)

        response = client.post("/api/v1/task", json={"taskId": "t1", "duration": 10})

        assert response.status_code == 500
        assert response.json() == {"code": SAVE_ERROR_CODE, "message": SAVE_ERROR_MESSAGE}


class TestGetTaskEndpoint:
    """Test GET /api/v1/task/{taskId}."""

    def test_average_of_two_records(self):
        """10 and 20 for t1 average to 15."""
        client, _ = create_test_app_and_client()
        client.post("/api/v1/task", json={"taskId": "t1", "duration": 10})
        client.post("/api/v1/task", json={"taskId": "t1", "duration": 20})

        response = client.get("/api/v1/task/t1")

        assert response.status_code == 200
        data = response.json()
        assert data["taskId"] == "t1"
        assert data["duration"] == 15
        assert data["id"] is None

    def test_average_truncates(self):
        """Averages are integer-truncated."""
        client, _ = create_test_app_and_client()
        for duration in (1, 2, 2):
            client.post("/api/v1/task", json={"taskId": "t1", "duration": duration})

        assert client.get("/api/v1/task/t1").json()["duration"] == 1

    def test_unknown_task_returns_zero(self):
        """No matches returns an empty aggregate with 200."""
        client, _ = create_test_app_and_client()

        response = client.get("/api/v1/task/nonexistent")

        assert response.status_code == 200
        assert response.json() == {"id": None, "taskId": "", "duration": 0}

    def test_other_task_ids_excluded(self):
        """Records for other ids do not affect the average."""
        client, _ = create_test_app_and_client()
        client.post("/api/v1/task", json={"taskId": "t1", "duration": 10})
        client.post("/api/v1/task", json={"taskId": "t2", "duration": 90})

        assert client.get("/api/v1/task/t1").json()["duration"] == 10
        assert client.get("/api/v1/task/t2").json()["duration"] == 90

    def test_unavailable_returns_503(self, null_store):
        """A store with no result container maps to 503."""
        client, _ = create_test_app_and_client(store=null_store)

        response = client.get("/api/v1/task/t1")

        assert response.status_code == 503
        assert response.json()["code"] == UNAVAILABLE_ERROR_CODE


class TestAppLifespan:
    """App startup builds the SQLite store and worker pool."""

    def test_round_trip_with_sqlite_file(self, tmp_path):
        """create_app wires a working service against a database file."""
        from taskstats.api.app import create_app

        settings = Settings(db_path=tmp_path / "app.db", worker_threads=2)

        with TestClient(create_app(settings)) as client:
            client.post("/api/v1/task", json={"taskId": "t1", "duration": 10})
            client.post("/api/v1/task", json={"taskId": "t1", "duration": 20})
            response = client.get("/api/v1/task/t1")

        assert response.json() == {"id": None, "taskId": "t1", "duration": 15}
        assert (tmp_path / "app.db").exists()

    def test_shutdown_stops_pool_and_releases_connections(self, tmp_path):
        """Leaving the lifespan shuts the executor down and disposes the engine."""
        from taskstats.api.app import create_app

        settings = Settings(db_path=tmp_path / "shutdown.db", worker_threads=2)

        with TestClient(create_app(settings)) as client:
            client.post("/api/v1/task", json={"taskId": "t1", "duration": 10})
            executor = client.app.state.task_service.executor

        with pytest.raises(RuntimeError):
            executor.submit(print)
        assert get_engine(settings.db_path).pool.checkedin() == 0

    def test_shutdown_with_injected_store(self, null_store):
        """An injected store is used as-is and the pool still shuts down."""
        from taskstats.api.app import create_app

        with TestClient(create_app(store=null_store), raise_server_exceptions=False) as client:
            service = client.app.state.task_service
            response = client.get("/api/v1/task/t1")

        assert service.store is null_store
        assert response.status_code == 503
        with pytest.raises(RuntimeError):
            service.executor.submit(print)

    def test_health(self):
        """Health check responds ok."""
        client, _ = create_test_app_and_client()

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
