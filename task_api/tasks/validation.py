"""Request body validation.

A single RequestValidator is built at startup and shared by every
request. It holds no state, so concurrent use is safe.
"""

from dataclasses import dataclass

from pydantic import ValidationError

from task_api.tasks.models import CreateTask

# pydantic error types meaning the body could not be decoded into the
# expected shape at all (as opposed to a shape with a bad value).
_UNPROCESSABLE_ERROR_TYPES = frozenset({
    "json_invalid",
    "json_type",
    "model_type",
    "model_attributes_type",
    "string_type",
    "string_unicode",
})


class BodyValidationError(Exception):
    """Base for request body failures. Carries the pydantic error list."""

    def __init__(self, message: str, errors: list[dict] | None = None):
        super().__init__(message)
        self.errors = errors or []


class UnprocessableBody(BodyValidationError):
    """Body is not JSON, or not a JSON object of the right types."""


class InvalidBody(BodyValidationError):
    """Body decoded fine but a field failed validation."""


@dataclass(frozen=True)
class RequestValidator:
    """Decodes and validates request bodies."""

    def parse_create(self, body: bytes | str) -> CreateTask:
        """Parse a create-task body.

        Raises:
            UnprocessableBody: malformed JSON, a non-object body, or a
                non-string ``task``.
            InvalidBody: ``task`` missing, null or empty, or a null body.
        """
        if not body:
            raise UnprocessableBody("Empty request body")

        try:
            return CreateTask.model_validate_json(body)
        except ValidationError as exc:
            errors = exc.errors(include_url=False)
            if any(_is_unprocessable(err) for err in errors):
                raise UnprocessableBody("Can't decode body", errors) from exc
            raise InvalidBody("Invalid body", errors) from exc


def _is_unprocessable(error: dict) -> bool:
    # JSON null (whole body or field) counts as absent, not malformed
    if error.get("input", ...) is None:
        return False
    return error["type"] in _UNPROCESSABLE_ERROR_TYPES
