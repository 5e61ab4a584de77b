"""Request/response records and response constructors."""

import json
from dataclasses import dataclass, field
from http import HTTPStatus

from task_api.logging.audit import get_audit_logger

CORS_HEADERS = {
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Origin": "*",
}

JSON_CONTENT_TYPE = "application/json"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"


@dataclass
class ApiRequest:
    method: str
    path: str
    path_parameters: dict[str, str] = field(default_factory=dict)
    body: bytes = b""


@dataclass
class ApiResponse:
    status_code: int
    headers: dict[str, str]
    body: bytes = b""

    def text(self) -> str:
        return self.body.decode("utf-8")

    def json(self):
        return json.loads(self.body)


def _headers(content_type: str, extra: dict[str, str] | None = None) -> dict[str, str]:
    headers = {**CORS_HEADERS, "Content-Type": content_type}
    if extra:
        headers.update(extra)
    return headers


def json_response(status: int, payload, headers: dict[str, str] | None = None) -> ApiResponse:
    """Serialize ``payload`` to JSON. Raises TypeError/ValueError if it can't be."""
    body = json.dumps(payload, allow_nan=False).encode("utf-8")
    return ApiResponse(status_code=status, headers=_headers(JSON_CONTENT_TYPE, headers), body=body)


def client_error(status: int) -> ApiResponse:
    """Plain-text response whose body is the reason phrase for ``status``."""
    return ApiResponse(
        status_code=int(status),
        headers=_headers(TEXT_CONTENT_TYPE),
        body=HTTPStatus(status).phrase.encode("utf-8"),
    )


def server_error(err: BaseException) -> ApiResponse:
    """Log ``err`` and return a generic 500. The detail stays server-side."""
    get_audit_logger().error(
        "Request failed",
        exc_info=err,
        extra={"audit_data": {
            "error_type": type(err).__name__,
            "error": str(err),
        }},
    )
    return client_error(HTTPStatus.INTERNAL_SERVER_ERROR)
