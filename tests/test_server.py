"""
Tests for the FastAPI todo service.
"""

from unittest.mock import AsyncMock, MagicMock

from fastapi.testclient import TestClient

from api.server import InMemoryStorageService, create_app
from todo_manager.config import ServerConfig
from todo_manager.models import create_todo
from todo_manager.storage import StorageService
from todo_manager.utils.exceptions import QuotaExceededError, ServiceUnavailableError


def _payload(*titles):
    return [create_todo({"title": title}).to_dict() for title in titles]


class TestTodoRoutes:
    """Collection endpoints without authentication."""

    def setup_method(self):
        self.client = TestClient(create_app(ServerConfig(persist=False)))

    def test_index_and_health(self):
        index = self.client.get("/").json()
        assert index["status"] == "running"
        assert index["version"] == "1.0.0"

        health = self.client.get("/health").json()
        assert health["status"] == "healthy"
        assert health["timestamp"].endswith("Z")

    def test_empty_collection(self):
        response = self.client.get("/todos")

        assert response.status_code == 200
        assert response.json() == []

    def test_replace_then_read(self):
        payload = _payload("One", "Two")

        response = self.client.post("/todos", json=payload)

        assert response.status_code == 200
        assert response.json() == {"count": 2}
        assert self.client.get("/todos").json() == payload

    def test_replace_overwrites_previous_collection(self):
        self.client.post("/todos", json=_payload("Old"))
        newer = _payload("New")

        self.client.post("/todos", json=newer)

        assert self.client.get("/todos").json() == newer

    def test_clear(self):
        self.client.post("/todos", json=_payload("One"))

        response = self.client.delete("/todos")

        assert response.json() == {"count": 0}
        assert self.client.get("/todos").json() == []

    def test_body_must_be_array_of_todos(self):
        assert self.client.post("/todos", json={"todos": []}).status_code == 422
        assert self.client.post("/todos", json=[{"id": "t1"}]).status_code == 422

    def test_bad_timestamp_is_invalid_data(self):
        item = _payload("One")[0]
        item["createdAt"] = "yesterday"

        response = self.client.post("/todos", json=[item])

        assert response.status_code == 422
        assert response.json()["error"] == "invalid-data"

    def test_unknown_route_is_json_404(self):
        response = self.client.get("/nope")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found", "message": "Route /nope not found"}


class TestAuthentication:
    """Bearer token protection of /todos."""

    def setup_method(self):
        self.client = TestClient(create_app(ServerConfig(api_token="s3cret", persist=False)))

    def test_missing_token(self):
        response = self.client.get("/todos")

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized", "message": "Authentication required"}

    def test_wrong_token(self):
        response = self.client.get("/todos", headers={"Authorization": "Bearer wrong"})
        assert response.status_code == 401

    def test_valid_token(self):
        response = self.client.get("/todos", headers={"Authorization": "Bearer s3cret"})
        assert response.status_code == 200

    def test_status_routes_are_open(self):
        assert self.client.get("/").status_code == 200
        assert self.client.get("/health").status_code == 200


class TestStorageFailures:
    """Storage errors and unexpected exceptions become JSON errors."""

    def _client(self, storage, **kwargs):
        return TestClient(create_app(ServerConfig(persist=False), storage=storage), **kwargs)

    def test_quota_exceeded_is_507(self):
        storage = MagicMock(spec=StorageService)
        storage.name = "mock"
        storage.save_todos = AsyncMock(side_effect=QuotaExceededError("Storage quota exceeded"))

        response = self._client(storage).post("/todos", json=_payload("Big"))

        assert response.status_code == 507
        assert response.json() == {"error": "quota-exceeded", "message": "Storage quota exceeded"}

    def test_unavailable_is_503(self):
        storage = MagicMock(spec=StorageService)
        storage.name = "mock"
        storage.get_todos = AsyncMock(side_effect=ServiceUnavailableError("Disk gone"))

        response = self._client(storage).get("/todos")

        assert response.status_code == 503

    def test_unexpected_error_is_500(self):
        storage = MagicMock(spec=StorageService)
        storage.name = "mock"
        storage.get_todos = AsyncMock(side_effect=RuntimeError("kaboom"))

        response = self._client(storage, raise_server_exceptions=False).get("/todos")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Server Error", "message": "Something went wrong"}


class TestPersistence:
    """File-backed collection under the data directory."""

    def test_collection_survives_new_app(self, tmp_path):
        config = ServerConfig(data_dir=str(tmp_path), persist=True)
        payload = _payload("Durable")

        TestClient(create_app(config)).post("/todos", json=payload)

        assert (tmp_path / "todos.json").exists()
        assert TestClient(create_app(config)).get("/todos").json() == payload

    def test_in_memory_storage(self):
        storage = InMemoryStorageService()
        client = TestClient(create_app(ServerConfig(persist=False), storage=storage))

        client.post("/todos", json=_payload("Kept"))

        assert storage.is_available()
        assert len(storage._todos) == 1
