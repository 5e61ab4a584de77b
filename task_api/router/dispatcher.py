"""Dispatcher: routes a request record to a task operation.

Flow: match route -> check path parameters -> validate body -> call store
-> shape response. Store failures and serialization failures become a
generic 500; everything the caller did wrong becomes a 4xx whose body is
the reason phrase.
"""

from http import HTTPStatus

from task_api.logging.audit import RequestTimer, get_audit_logger
from task_api.router.responses import (
    ApiRequest,
    ApiResponse,
    client_error,
    json_response,
    server_error,
)
from task_api.router.routes import ROUTES, Route, match_route
from task_api.tasks.store import TaskStore
from task_api.tasks.validation import InvalidBody, RequestValidator, UnprocessableBody


def task_location(task_id: str) -> str:
    return f"/api/task/{task_id}"


class Dispatcher:
    """Stateless request handler shared across invocations."""

    def __init__(
        self,
        store: TaskStore,
        validator: RequestValidator,
        routes: tuple[Route, ...] = ROUTES,
    ):
        self._store = store
        self._validator = validator
        self._routes = routes
        self._operations = {
            "list": self._list_tasks,
            "get": self._get_task,
            "create": self._create_task,
            "update": self._update_task,
            "delete": self._delete_task,
        }

    async def dispatch(self, request: ApiRequest) -> ApiResponse:
        logger = get_audit_logger()
        logger.info(
            "Received request",
            extra={"audit_data": {"method": request.method, "path": request.path}},
        )

        with RequestTimer() as timer:
            match = match_route(request, self._routes)
            if match is None:
                response = client_error(HTTPStatus.NOT_FOUND)
                operation = None
            else:
                operation = match.route.operation
                handler = self._operations[operation]
                response = await handler(match.path_parameters, request.body, **dict(match.route.options))

        logger.info(
            "Request handled",
            extra={"audit_data": {
                "method": request.method,
                "path": request.path,
                "operation": operation,
                "status_code": response.status_code,
                "latency_ms": timer.elapsed_ms,
            }},
        )
        return response

    # --- operations ---

    async def _list_tasks(self, params: dict[str, str], body: bytes) -> ApiResponse:
        try:
            tasks = await self._store.list_all()
        except Exception as exc:
            return server_error(exc)

        get_audit_logger().info("Fetched tasks", extra={"audit_data": {"count": len(tasks)}})
        return self._ok(HTTPStatus.OK, [t.to_dict() for t in tasks])

    async def _get_task(self, params: dict[str, str], body: bytes) -> ApiResponse:
        task_id = params.get("id")
        if not task_id:
            return client_error(HTTPStatus.BAD_REQUEST)

        try:
            task = await self._store.get(task_id)
        except Exception as exc:
            return server_error(exc)

        if task is None:
            return client_error(HTTPStatus.NOT_FOUND)
        return self._ok(HTTPStatus.OK, task.to_dict())

    async def _create_task(self, params: dict[str, str], body: bytes) -> ApiResponse:
        logger = get_audit_logger()
        try:
            request = self._validator.parse_create(body)
        except UnprocessableBody as exc:
            logger.warning("Can't decode body", extra={"audit_data": {"errors": exc.errors}})
            return client_error(HTTPStatus.UNPROCESSABLE_ENTITY)
        except InvalidBody as exc:
            logger.warning("Invalid body", extra={"audit_data": {"errors": exc.errors}})
            return client_error(HTTPStatus.BAD_REQUEST)

        try:
            task = await self._store.insert(request)
        except Exception as exc:
            return server_error(exc)

        logger.info("Inserted task", extra={"audit_data": {"task_id": task.id}})
        return self._ok(HTTPStatus.CREATED, task.to_dict(), {"Location": task_location(task.id)})

    async def _update_task(self, params: dict[str, str], body: bytes, *, status: bool) -> ApiResponse:
        # Target status comes from the matched route; the body is ignored.
        task_id = params.get("id")
        if not task_id:
            return client_error(HTTPStatus.BAD_REQUEST)

        try:
            task = await self._store.update(task_id, status)
        except Exception as exc:
            return server_error(exc)

        if task is None:
            return client_error(HTTPStatus.NOT_FOUND)

        get_audit_logger().info(
            "Updated task",
            extra={"audit_data": {"task_id": task.id, "status": task.status}},
        )
        return self._ok(HTTPStatus.OK, task.to_dict(), {"Location": task_location(task.id)})

    async def _delete_task(self, params: dict[str, str], body: bytes) -> ApiResponse:
        task_id = params.get("id")
        if not task_id:
            return client_error(HTTPStatus.BAD_REQUEST)

        try:
            task = await self._store.delete(task_id)
        except Exception as exc:
            return server_error(exc)

        if task is None:
            return client_error(HTTPStatus.NOT_FOUND)

        get_audit_logger().info("Deleted task", extra={"audit_data": {"task_id": task.id}})
        return self._ok(HTTPStatus.OK, task.to_dict())

    @staticmethod
    def _ok(status: int, payload, headers: dict[str, str] | None = None) -> ApiResponse:
        try:
            return json_response(int(status), payload, headers)
        except (TypeError, ValueError) as exc:
            return server_error(exc)

