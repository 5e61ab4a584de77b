"""Integration tests for task_api/main.py: full request cycle via ASGI transport."""

import httpx
import pytest

from task_api.main import app, get_dispatcher
from task_api.router.dispatcher import Dispatcher
from task_api.tasks.store import InMemoryTaskStore
from task_api.tasks.validation import RequestValidator
from tests.conftest import assert_cors


@pytest.fixture
def store():
    return InMemoryTaskStore()


@pytest.fixture
def app_client(store):
    """httpx AsyncClient wired to the FastAPI app with a fresh in-memory store."""
    app.dependency_overrides[get_dispatcher] = lambda: Dispatcher(
        store=store, validator=RequestValidator()
    )
    transport = httpx.ASGITransport(app=app)
    client = httpx.AsyncClient(transport=transport, base_url="http://test")
    yield client
    app.dependency_overrides.clear()


class TestTaskLifecycle:

    async def test_create_update_delete(self, app_client):
        resp = await app_client.post("/api/task", json={"task": "Buy milk"})
        assert resp.status_code == 201
        task = resp.json()
        assert resp.headers["location"] == f"/api/task/{task['id']}"

        resp = await app_client.get("/api/task")
        assert resp.json() == [task]

        resp = await app_client.put(f"/api/task/{task['id']}")
        assert resp.json()["status"] is True

        resp = await app_client.put(f"/api/undoTask/{task['id']}", json={"status": True})
        assert resp.json()["status"] is False

        resp = await app_client.get(f"/api/task/{task['id']}")
        assert resp.json() == {**task, "status": False}

        resp = await app_client.delete(f"/api/deleteTask/{task['id']}")
        assert resp.status_code == 200
        assert resp.json()["id"] == task["id"]

        resp = await app_client.delete(f"/api/deleteTask/{task['id']}")
        assert resp.status_code == 404


class TestHttpSurface:

    async def test_malformed_body(self, app_client):
        resp = await app_client.post(
            "/api/task", content=b"{oops", headers={"Content-Type": "application/json"}
        )
        assert resp.status_code == 422
        assert resp.text == "Unprocessable Entity"

    async def test_patch_not_found(self, app_client):
        resp = await app_client.patch("/api/task", json={"task": "x"})
        assert resp.status_code == 404
        assert resp.text == "Not Found"
        assert_cors(resp.headers)

    @pytest.mark.parametrize("method", ["TRACE", "CONNECT", "FOO"])
    async def test_unlisted_method_not_found(self, app_client, method):
        resp = await app_client.request(method, "/api/task")
        assert resp.status_code == 404
        assert resp.text == "Not Found"
        assert_cors(resp.headers)

    async def test_framework_docs_disabled(self, app_client):
        resp = await app_client.get("/docs")
        assert resp.status_code == 404
        assert resp.text == "Not Found"

    async def test_cors_on_success(self, app_client):
        resp = await app_client.get("/api/task")
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/json"
        assert_cors(resp.headers)


class TestGetDispatcher:

    def test_cached(self, override_settings, monkeypatch):
        import task_api.tasks.factory as factory_mod

        monkeypatch.setattr(factory_mod, "_store", None)
        override_settings(TASK_STORE_BACKEND="memory")
        get_dispatcher.cache_clear()
        try:
            assert get_dispatcher() is get_dispatcher()
        finally:
            get_dispatcher.cache_clear()
