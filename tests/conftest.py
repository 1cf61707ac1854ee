"""
Shared pytest fixtures for the task manager test suite.

Every test gets its own application instance bound to a tasks file under
``tmp_path``, so repository state and the user list never leak between
tests.

Key Concepts Demonstrated:
- Function-scoped app fixture with per-test durable storage
- Factory fixtures (user_factory, task_factory) for test data
- Auth header fixtures built from real login-issued tokens
"""

from __future__ import annotations

import os
from collections.abc import Callable
from typing import Any

import pytest
from faker import Faker

# Set testing environment before importing the app
os.environ["FLASK_ENV"] = "testing"
os.environ["TEST_JWT_SECRET_KEY"] = "test-jwt-secret-key-for-local-tests-123456"

from taskman_app import EXTENSION_KEY, create_app
from taskman_app.jwt import create_token
from taskman_app.models import Task, TaskStatus, User

fake = Faker()


def auth_headers(token: str) -> dict[str, str]:
    """Build common JSON API headers with bearer token auth."""
    return {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
        "Accept": "application/json",
    }


# -----------------------------------------------------------------------------
# Application Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def tasks_file(tmp_path):
    """Path of the JSON document backing the repository for one test."""
    return tmp_path / "tasks.json"


@pytest.fixture
def app(tasks_file):
    """
    Create a testing app whose repository is backed by ``tasks_file``.

    Function scope keeps the in-memory task and user lists isolated.
    """
    application = create_app("testing", overrides={"TASKS_FILE": str(tasks_file)})
    yield application


@pytest.fixture
def client(app):
    """Flask test client for making HTTP requests without a server."""
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def repository(app):
    """The repository behind ``app``, reached without pushing an app context."""
    return app.extensions[EXTENSION_KEY]["repository"]


@pytest.fixture
def credential_store(app):
    return app.extensions[EXTENSION_KEY]["credentials"]


@pytest.fixture
def secret_key(app) -> str:
    return app.config["JWT_SECRET_KEY"]


# -----------------------------------------------------------------------------
# Identity Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def user_factory(credential_store) -> Callable[..., User]:
    """
    Register users directly in the app's credential store.

    Example:
        def test_something(user_factory):
            user = user_factory(username="bob")
            assert user.id == 1
    """

    def _create_user(username: str | None = None, password: str = "StrongPass123!") -> User:
        return credential_store.register(username or fake.unique.user_name(), password)

    return _create_user


@pytest.fixture
def test_token(user_factory, secret_key) -> str:
    """A valid token for a freshly registered user."""
    user = user_factory(username="user_one")
    return create_token(
        user_id=user.id,
        username=user.username,
        secret_key=secret_key,
        expiry_hours=1,
    )


@pytest.fixture
def api_headers(test_token) -> dict[str, str]:
    return auth_headers(test_token)


# -----------------------------------------------------------------------------
# Task Data Fixtures
# -----------------------------------------------------------------------------

@pytest.fixture
def task_factory(repository) -> Callable[..., Task]:
    """
    Create tasks through the repository, with Faker defaults.

    Tasks are written to the test's own tasks file and vanish with
    ``tmp_path``, so no explicit cleanup is needed.
    """

    def _create_task(
        *,
        title: str | None = None,
        description: str | None = None,
        status: str = TaskStatus.PENDING.value,
    ) -> Task:
        return repository.create(
            title=title or fake.sentence(nb_words=4),
            description=description or fake.paragraph(),
            status=status,
        )

    return _create_task


@pytest.fixture
def sample_task(task_factory) -> Task:
    return task_factory(
        title="Sample Task",
        description="This is a sample task for testing",
    )


@pytest.fixture
def multiple_tasks(task_factory) -> list[Task]:
    """Four tasks covering every status."""
    return [
        task_factory(title="Pending One", status=TaskStatus.PENDING.value),
        task_factory(title="In Progress One", status=TaskStatus.IN_PROGRESS.value),
        task_factory(title="Completed One", status=TaskStatus.COMPLETED.value),
        task_factory(title="In Progress Two", status=TaskStatus.IN_PROGRESS.value),
    ]


@pytest.fixture
def valid_task_data() -> dict[str, Any]:
    return {
        "title": "Test Task",
        "description": "This is a test task description",
        "status": TaskStatus.IN_PROGRESS.value,
    }


@pytest.fixture
def minimal_task_data() -> dict[str, str]:
    """Smallest valid create payload (status omitted)."""
    return {"title": "Minimal Task", "description": "Only the required fields"}
