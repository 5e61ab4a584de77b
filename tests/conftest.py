"""Shared fixtures for the task API test suite."""

import json

import pytest

from task_api.config.settings import get_settings
from task_api.router.dispatcher import Dispatcher
from task_api.router.responses import ApiRequest
from task_api.tasks.models import Task
from task_api.tasks.store import InMemoryTaskStore
from task_api.tasks.validation import RequestValidator


@pytest.fixture
def sample_tasks() -> list[Task]:
    return [
        Task(id="abc123", task="Write the report", status=False),
        Task(id="def456", task="Water the plants", status=True),
    ]


@pytest.fixture
def memory_store(sample_tasks) -> InMemoryTaskStore:
    return InMemoryTaskStore(sample_tasks)


@pytest.fixture
def validator() -> RequestValidator:
    return RequestValidator()


@pytest.fixture
def dispatcher(memory_store, validator) -> Dispatcher:
    return Dispatcher(store=memory_store, validator=validator)


@pytest.fixture
def override_settings(monkeypatch):
    """Factory fixture: set env vars and clear settings cache.

    Usage:
        override_settings(TASK_STORE_BACKEND="dynamodb", LOG_LEVEL="DEBUG")
    """
    def _override(**kwargs):
        for key, value in kwargs.items():
            monkeypatch.setenv(key.upper(), str(value))
        # Clear lru_cache so Settings re-reads env
        get_settings.cache_clear()

    yield _override

    get_settings.cache_clear()


def make_request(method: str, path: str, body=None, path_parameters: dict | None = None) -> ApiRequest:
    """Build an ApiRequest; dict/list bodies are JSON-encoded."""
    if isinstance(body, (dict, list)):
        raw = json.dumps(body).encode("utf-8")
    elif isinstance(body, str):
        raw = body.encode("utf-8")
    else:
        raw = body or b""
    return ApiRequest(
        method=method,
        path=path,
        path_parameters=path_parameters or {},
        body=raw,
    )


def assert_cors(headers: dict) -> None:
    lowered = {k.lower(): v for k, v in headers.items()}
    assert lowered["access-control-allow-headers"] == "Content-Type"
    assert lowered["access-control-allow-origin"] == "*"
