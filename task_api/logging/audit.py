"""JSON-lines logging for the task API.

One record per line on the ``task_api.audit`` logger. The Dispatcher
attaches per-request fields (method, path, operation, status_code,
latency_ms, task_id) through ``extra={"audit_data": {...}}`` and store
failures arrive with ``exc_info``, rendered into an ``exception`` field.
Every line carries the Lambda request id so a CloudWatch query can join
the "Received request" and "Request handled" records of one invocation.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone

from task_api.config.settings import get_settings

LOGGER_NAME = "task_api.audit"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": request_id_var.get(""),
        }
        entry.update(getattr(record, "audit_data", {}))
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        # pydantic error contexts and Task fields may not be JSON-native
        return json.dumps(entry, default=str)


def setup_logging() -> None:
    """Attach JSON handlers per LOG_LEVEL / AUDIT_LOG_FILE. Safe to call twice."""
    settings = get_settings()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    logger.handlers.clear()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.audit_log_file:
        handlers.append(logging.FileHandler(settings.audit_log_file))

    formatter = JSONFormatter()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # Lambda installs its own root handler; avoid duplicate lines
    logger.propagate = False


def get_audit_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def generate_request_id() -> str:
    return uuid.uuid4().hex[:12]


def resolve_request_id(lambda_context=None) -> str:
    """Lambda's aws_request_id when invoked through Mangum, else a fresh id."""
    return getattr(lambda_context, "aws_request_id", None) or generate_request_id()


class RequestTimer:
    """Wall-clock latency of one dispatch, in milliseconds."""

    def __init__(self):
        self.start_time: float = 0
        self.elapsed_ms: float = 0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.elapsed_ms = round((time.perf_counter() - self.start_time) * 1000, 2)
