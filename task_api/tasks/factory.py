"""Factory for task store backends."""

from task_api.config.settings import get_settings
from task_api.tasks.store import InMemoryTaskStore, TaskStore

_store: TaskStore | None = None


def get_task_store() -> TaskStore:
    """Get the task store singleton for the configured backend."""
    global _store
    if _store is not None:
        return _store

    settings = get_settings()
    backend = settings.task_store_backend

    if backend == "memory":
        _store = InMemoryTaskStore()
        return _store

    if backend == "dynamodb":
        # Lazy import to avoid boto3 dependency when not needed
        from task_api.tasks.dynamodb_store import DynamoDBTaskStore
        _store = DynamoDBTaskStore(
            table_name=settings.dynamodb_table_name,
            region=settings.aws_region,
        )
        return _store

    raise ValueError(f"Unknown task store backend: {backend}")
