"""HTTP tests for the /tasks endpoints, backed by the in-memory repository."""

import uuid
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from app.models.task import Task, TaskPriority, TaskStatus

pytestmark = pytest.mark.unit


def _future_iso(days: int = 3) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def _seed(repository, owner, title="Seeded", **fields) -> Task:
    task = Task.new(title, owner)
    for name, value in fields.items():
        setattr(task, name, value)
    repository.tasks[task.id] = task
    return task


def test_create_task_returns_201_owned_by_caller(client, repository, user_id):
    response = client.post(
        "/tasks",
        json={"title": "Write docs", "priority": "high", "due_date": _future_iso()},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["title"] == "Write docs"
    assert body["priority"] == "high"
    assert body["status"] == "pending"
    assert body["user_id"] == str(user_id)
    assert body["completed_at"] is None
    assert set(body) == {
        "id", "title", "description", "priority", "status", "user_id",
        "created_at", "updated_at", "due_date", "completed_at",
    }
    assert uuid.UUID(body["id"]) in repository.tasks
    assert repository.commits == 1


def test_create_task_defaults_priority_to_medium(client):
    response = client.post("/tasks", json={"title": "Defaults"})
    assert response.status_code == 201
    assert response.json()["priority"] == "medium"


def test_create_task_with_blank_title_is_rejected(client, repository):
    response = client.post("/tasks", json={"title": "   "})

    assert response.status_code == 400
    assert response.json() == {
        "error": {"code": "VALIDATION_ERROR", "message": "Title cannot be empty", "status": 400}
    }
    assert repository.tasks == {}


def test_create_task_with_past_due_date_is_rejected(client):
    past = (datetime.now(timezone.utc) - timedelta(days=1)).isoformat()
    response = client.post("/tasks", json={"title": "Late", "due_date": past})

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Due date must be in the future"


def test_create_task_with_unknown_priority_is_validation_error(client):
    response = client.post("/tasks", json={"title": "x", "priority": "urgent"})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


def test_malformed_json_body_is_serialization_error(client):
    response = client.post(
        "/tasks",
        content=b'{"title": "oops"',
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "SERIALIZATION_ERROR"


def test_missing_user_header_is_authentication_error(client):
    del client.headers["X-User-ID"]
    response = client.get("/tasks")

    assert response.status_code == 401
    assert response.json() == {
        "error": {
            "code": "AUTHENTICATION_ERROR",
            "message": "X-User-ID header is required",
            "status": 401,
        }
    }


def test_malformed_user_header_is_authentication_error(client):
    response = client.get("/tasks", headers={"X-User-ID": "not-a-uuid"})
    assert response.status_code == 401


def test_get_task(client, repository, user_id):
    task = _seed(repository, user_id, title="Find me")

    response = client.get(f"/tasks/{task.id}")

    assert response.status_code == 200
    assert response.json()["title"] == "Find me"


def test_get_unknown_task_is_404(client):
    response = client.get(f"/tasks/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json() == {
        "error": {"code": "NOT_FOUND", "message": "Task not found", "status": 404}
    }


def test_update_task_partial(client, repository, user_id):
    task = _seed(repository, user_id, title="Before", description="unchanged")

    response = client.put(f"/tasks/{task.id}", json={"title": "After", "status": "inprogress"})

    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "After"
    assert body["status"] == "inprogress"
    assert body["description"] == "unchanged"
    assert body["completed_at"] is None


def test_update_to_completed_stamps_completed_at(client, repository, user_id):
    task = _seed(repository, user_id)

    response = client.put(f"/tasks/{task.id}", json={"status": "completed"})

    assert response.status_code == 200
    assert response.json()["completed_at"] is not None


def test_update_with_too_long_description_is_rejected(client, repository, user_id):
    task = _seed(repository, user_id)

    response = client.put(f"/tasks/{task.id}", json={"description": "d" * 2001})

    assert response.status_code == 400
    assert repository.tasks[task.id].description is None


def test_update_unknown_task_is_404(client):
    response = client.put(f"/tasks/{uuid.uuid4()}", json={"title": "x"})
    assert response.status_code == 404


def test_complete_task(client, repository, user_id):
    task = _seed(repository, user_id)

    response = client.post(f"/tasks/{task.id}/complete")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "completed"
    assert body["completed_at"] == body["updated_at"]


def test_delete_task(client, repository, user_id):
    task = _seed(repository, user_id)

    response = client.delete(f"/tasks/{task.id}")

    assert response.status_code == 204
    assert response.content == b""
    assert task.id not in repository.tasks

    assert client.delete(f"/tasks/{task.id}").status_code == 404


def test_list_tasks_defaults(client, repository, user_id):
    for index in range(3):
        _seed(repository, user_id, title=f"Task {index}")

    response = client.get("/tasks")

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 3
    assert body["page"] == 1
    assert body["limit"] == 20
    assert len(body["tasks"]) == 3


def test_list_tasks_filters(client, repository, user_id):
    other = uuid.uuid4()
    _seed(repository, user_id, priority=TaskPriority.HIGH)
    _seed(repository, user_id, priority=TaskPriority.LOW)
    _seed(repository, other, priority=TaskPriority.HIGH, status=TaskStatus.COMPLETED)

    response = client.get("/tasks", params={"priority": "high", "user_id": str(user_id)})

    body = response.json()
    assert body["total"] == 1
    assert body["tasks"][0]["user_id"] == str(user_id)
    assert body["tasks"][0]["priority"] == "high"


def test_list_overdue_tasks(client, repository, user_id):
    yesterday = datetime.now(timezone.utc) - timedelta(days=1)
    overdue = _seed(repository, user_id, title="late", due_date=yesterday)
    _seed(repository, user_id, title="done", due_date=yesterday, status=TaskStatus.COMPLETED)
    _seed(repository, user_id, title="no due date")

    body = client.get("/tasks", params={"overdue": "true"}).json()

    assert body["total"] == 1
    assert body["tasks"][0]["id"] == str(overdue.id)


def test_list_tasks_pagination(client, repository, user_id):
    for index in range(5):
        _seed(repository, user_id, title=f"Task {index}")

    body = client.get("/tasks", params={"page": 2, "limit": 2}).json()
    assert body["total"] == 5
    assert body["page"] == 2
    assert body["limit"] == 2
    assert len(body["tasks"]) == 2

    clamped = client.get("/tasks", params={"limit": 1000}).json()
    assert clamped["limit"] == 100


def test_list_tasks_rejects_negative_page(client):
    response = client.get("/tasks", params={"page": -1})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.parametrize("param", ["page", "limit"])
def test_list_tasks_rejects_out_of_range_pagination(client, repository, param):
    calls = []

    async def recording_list(query):
        calls.append(query)
        return [], 0

    repository.list = recording_list

    response = client.get("/tasks", params={param: 10**20})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"
    assert calls == []


def test_list_tasks_accepts_largest_page(client):
    response = client.get("/tasks", params={"page": 2**32 - 1})

    assert response.status_code == 200
    assert response.json()["tasks"] == []


def test_database_errors_are_hidden(client, repository, caplog):
    async def broken_list(query):
        raise OperationalError("SELECT ...", {}, Exception("connection refused"))

    repository.list = broken_list
    response = client.get("/tasks")

    assert response.status_code == 500
    assert response.json() == {
        "error": {
            "code": "DATABASE_ERROR",
            "message": "A database error occurred. Please try again later.",
            "status": 500,
        }
    }
    assert "connection refused" in caplog.text
