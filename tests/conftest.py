"""
Pytest configuration and shared fixtures.
"""

import os
import uuid

import pytest
from fastapi.testclient import TestClient

from app.core.dependencies import get_task_service
from app.main import create_app
from app.services.task_service import TaskService
from tests.fakes import InMemoryTaskRepository


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no external deps")
    config.addinivalue_line("markers", "db: requires database")


def pytest_collection_modifyitems(config, items):
    run_db = os.environ.get("RUN_DB_TESTS") == "1"

    skip_db = pytest.mark.skip(reason="db tests skipped by default; set RUN_DB_TESTS=1 to enable")

    for item in items:
        if "db" in item.keywords and not run_db:
            item.add_marker(skip_db)


@pytest.fixture
def user_id() -> uuid.UUID:
    return uuid.uuid4()


@pytest.fixture
def repository() -> InMemoryTaskRepository:
    return InMemoryTaskRepository()


@pytest.fixture
def client(repository, user_id):
    """
    TestClient with the task service backed by an in-memory repository.

    The lifespan is not entered, so no connection pool is opened.
    """
    app = create_app()
    app.dependency_overrides[get_task_service] = lambda: TaskService(repository=repository)
    test_client = TestClient(app)
    test_client.headers.update({"X-User-ID": str(user_id)})
    return test_client
