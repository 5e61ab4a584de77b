"""Task API: FastAPI application entry point.

Every path goes through a single catch-all route that converts the ASGI
request into an ApiRequest and hands it to the Dispatcher. The route
table lives in task_api.router.routes, not in FastAPI.
"""

from contextlib import asynccontextmanager
from functools import lru_cache
from http import HTTPStatus

from fastapi import Depends, FastAPI, Request
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from task_api.logging.audit import get_audit_logger, request_id_var, resolve_request_id, setup_logging
from task_api.router.dispatcher import Dispatcher
from task_api.router.responses import ApiRequest, ApiResponse, client_error
from task_api.tasks.factory import get_task_store
from task_api.tasks.validation import RequestValidator

VERSION = "0.1.0"

METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle hooks."""
    setup_logging()
    get_audit_logger().info("Task API started")
    yield
    get_audit_logger().info("Task API stopped")


app = FastAPI(
    title="Task API",
    description="Task tracking API for API Gateway + Lambda",
    version=VERSION,
    lifespan=lifespan,
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
)


@lru_cache
def get_dispatcher() -> Dispatcher:
    """Build the process-wide Dispatcher once: store singleton + one validator."""
    return Dispatcher(store=get_task_store(), validator=RequestValidator())


@app.exception_handler(StarletteHTTPException)
async def routing_error(request: Request, exc: StarletteHTTPException):
    """Framework-level rejections (methods outside METHODS) look like any unmatched route."""
    status = exc.status_code
    if status == HTTPStatus.METHOD_NOT_ALLOWED:
        status = HTTPStatus.NOT_FOUND
    return _to_response(client_error(status))


@app.api_route("/{full_path:path}", methods=METHODS, include_in_schema=False)
async def dispatch(request: Request, dispatcher: Dispatcher = Depends(get_dispatcher)):
    request_id_var.set(resolve_request_id(request.scope.get("aws.context")))

    api_request = ApiRequest(
        method=request.method,
        path=request.url.path,
        path_parameters=_gateway_path_parameters(request),
        body=await request.body(),
    )
    return _to_response(await dispatcher.dispatch(api_request))


def _to_response(result: ApiResponse) -> Response:
    return Response(
        content=result.body,
        status_code=result.status_code,
        headers=result.headers,
    )


def _gateway_path_parameters(request: Request) -> dict[str, str]:
    """Path parameters API Gateway resolved for this event, if any."""
    event = request.scope.get("aws.event") or {}
    params = event.get("pathParameters") or {}
    return {str(k): str(v) for k, v in params.items() if v is not None}
