"""
タスクAPIエンドポイントのテスト

サービス層はモックに差し替え、HTTP の入出力とエラー変換を検証する。
"""
import asyncio
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from taskhub.domain.entity.task_entity import Task
from taskhub.domain.exception.common_exceptions import StorageError
from taskhub.domain.exception.task_exceptions import TaskNotFoundError, TaskValidationError
from taskhub.infra.rest_api.dependencies import get_task_service
from taskhub.infra.rest_api.main import create_app


def make_task(task_id: int = 1, completed: bool = False) -> Task:
    task = Task.create("Title", "Description")
    task.id = task_id
    task.completed = completed
    return task


@pytest.fixture
def task_service():
    return AsyncMock()


@pytest.fixture
def client(settings, task_service):
    app = create_app(settings)
    app.dependency_overrides[get_task_service] = lambda: task_service
    with TestClient(app) as client:
        yield client


class TestTaskAPI:
    def test_health_check(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Request-ID" in response.headers

    def test_create_task(self, client, task_service):
        task_service.create_task.return_value = make_task(5)

        response = client.post("/api/v1/tasks", json={"title": "Title", "description": "Description"})

        assert response.status_code == 201
        data = response.json()
        assert data["id"] == 5
        assert data["completed"] is False
        task_service.create_task.assert_awaited_once_with("Title", "Description")

    def test_create_task_validation_error(self, client, task_service):
        task_service.create_task.side_effect = TaskValidationError("Title is required")

        response = client.post("/api/v1/tasks", json={"title": "", "description": "d"})

        assert response.status_code == 400
        data = response.json()
        assert data["error_type"] == "task_validation_error"
        assert data["detail"] == "Title is required"
        assert data["retry_available"] is False

    def test_create_task_malformed_body(self, client):
        response = client.post("/api/v1/tasks", json={"title": "only title"})

        assert response.status_code == 422
        assert response.json()["error_type"] == "validation_error"

    def test_get_all_tasks(self, client, task_service):
        task_service.get_all_tasks.return_value = [make_task(1), make_task(2)]

        response = client.get("/api/v1/tasks")

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 2
        assert [t["id"] for t in data["tasks"]] == [1, 2]

    def test_get_tasks_by_status(self, client, task_service):
        task_service.get_tasks_by_status.return_value = [make_task(3, completed=True)]

        response = client.get("/api/v1/tasks/status", params={"completed": "true"})

        assert response.status_code == 200
        assert response.json()["tasks"][0]["completed"] is True
        task_service.get_tasks_by_status.assert_awaited_once_with(True)

    def test_get_tasks_by_status_requires_flag(self, client):
        response = client.get("/api/v1/tasks/status")

        assert response.status_code == 422

    def test_get_task_not_found(self, client, task_service):
        task_service.get_task_by_id.side_effect = TaskNotFoundError(9)

        response = client.get("/api/v1/tasks/9")

        assert response.status_code == 404
        assert response.json()["detail"] == "Task with ID 9 not found"

    def test_update_task_without_completed_keeps_status(self, client, task_service):
        task_service.update_task.return_value = make_task(1, completed=True)

        response = client.put("/api/v1/tasks/1", json={"title": "New"})

        assert response.status_code == 200
        task_service.update_task.assert_awaited_once_with(1, "New", "", None)

    def test_update_task_with_completed(self, client, task_service):
        task_service.update_task.return_value = make_task(1, completed=False)

        response = client.put("/api/v1/tasks/1", json={"completed": False})

        assert response.status_code == 200
        task_service.update_task.assert_awaited_once_with(1, "", "", False)

    def test_delete_task(self, client, task_service):
        response = client.delete("/api/v1/tasks/1")

        assert response.status_code == 200
        assert response.json() == {"message": "Task deleted successfully"}
        task_service.delete_task.assert_awaited_once_with(1)

    def test_complete_and_uncomplete(self, client, task_service):
        task_service.mark_task_as_completed.return_value = make_task(1, completed=True)
        task_service.mark_task_as_uncompleted.return_value = make_task(1, completed=False)

        assert client.patch("/api/v1/tasks/1/complete").json()["completed"] is True
        assert client.patch("/api/v1/tasks/1/uncomplete").json()["completed"] is False

    def test_storage_error_maps_to_500(self, client, task_service):
        task_service.get_all_tasks.side_effect = StorageError("disk failure", operation="get_all_tasks")

        response = client.get("/api/v1/tasks")

        assert response.status_code == 500
        assert response.json()["error_type"] == "storage_error"

    def test_slow_service_times_out(self, settings, task_service):
        async def slow():
            await asyncio.sleep(5)
            return []

        task_service.get_all_tasks.side_effect = slow
        app = create_app(settings.model_copy(update={"request_timeout_seconds": 0.05}))
        app.dependency_overrides[get_task_service] = lambda: task_service

        with TestClient(app) as client:
            response = client.get("/api/v1/tasks")

        assert response.status_code == 504
        assert response.json()["retry_available"] is True


class TestTaskAPIWithStorage:
    """実際のリポジトリ（直接SQL）を使ったエンドツーエンドのテスト"""

    @pytest.fixture
    def client(self, settings):
        with TestClient(create_app(settings)) as client:
            yield client

    def test_task_lifecycle(self, client):
        created = client.post("/api/v1/tasks", json={"title": "Write", "description": "Docs"}).json()
        task_id = created["id"]

        updated = client.put(f"/api/v1/tasks/{task_id}", json={"description": "More docs"}).json()
        assert updated["title"] == "Write"
        assert updated["description"] == "More docs"

        client.patch(f"/api/v1/tasks/{task_id}/complete")
        done = client.get("/api/v1/tasks/status", params={"completed": True}).json()
        assert [t["id"] for t in done["tasks"]] == [task_id]

        assert client.delete(f"/api/v1/tasks/{task_id}").status_code == 200
        assert client.get(f"/api/v1/tasks/{task_id}").status_code == 404

    def test_zero_id_is_validation_error(self, client):
        response = client.get("/api/v1/tasks/0")

        assert response.status_code == 400


def test_unexpected_error_maps_to_500(settings, task_service):
    task_service.get_all_tasks.side_effect = RuntimeError("unexpected")
    app = create_app(settings)
    app.dependency_overrides[get_task_service] = lambda: task_service

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/api/v1/tasks")

    assert response.status_code == 500
    assert response.json()["error_type"] == "internal_error"


def test_unexpected_error_in_development_keeps_error_body(settings, task_service):
    task_service.get_all_tasks.side_effect = RuntimeError("boom")
    app = create_app(settings.model_copy(update={"environment": "development"}))
    app.dependency_overrides[get_task_service] = lambda: task_service

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/api/v1/tasks")

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("application/json")
    data = response.json()
    assert data["error_type"] == "internal_error"
    # 開発環境では例外メッセージを返す
    assert data["detail"] == "boom"


def test_unexpected_error_outside_development_hides_detail(settings, task_service):
    task_service.get_all_tasks.side_effect = RuntimeError("boom")
    app = create_app(settings.model_copy(update={"environment": "production"}))
    app.dependency_overrides[get_task_service] = lambda: task_service

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/api/v1/tasks")

    assert response.status_code == 500
    assert "detail" not in response.json()


@pytest.mark.parametrize("path,method", [("/api/v1/tasks", "post"), ("/api/v1/tasks/1", "put")])
def test_title_longer_than_column_is_rejected(client, task_service, path, method):
    response = getattr(client, method)(path, json={"title": "x" * 256, "description": "d"})

    assert response.status_code == 422
    task_service.create_task.assert_not_called()
    task_service.update_task.assert_not_called()


class TestTaskAPIWithOrmStorage:
    """Tortoise ORM バックエンドでのエンドツーエンドのテスト"""

    @pytest.fixture
    def client(self, settings):
        orm_settings = settings.model_copy(update={"task_repository_backend": "tortoise"})
        with TestClient(create_app(orm_settings)) as client:
            yield client

    def test_task_lifecycle(self, client):
        created = client.post("/api/v1/tasks", json={"title": "Write", "description": "Docs"})
        assert created.status_code == 201
        task_id = created.json()["id"]

        completed = client.put(f"/api/v1/tasks/{task_id}", json={"completed": True}).json()
        assert completed["completed"] is True
        assert completed["title"] == "Write"

        pending = client.get("/api/v1/tasks/status", params={"completed": False}).json()
        assert pending == {"tasks": [], "count": 0}

        assert client.delete(f"/api/v1/tasks/{task_id}").status_code == 200
        assert client.get(f"/api/v1/tasks/{task_id}").status_code == 404
