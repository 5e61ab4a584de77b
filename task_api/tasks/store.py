"""Task store abstraction + in-memory implementation."""

import uuid
from abc import ABC, abstractmethod

from task_api.tasks.models import CreateTask, Task


class StoreError(Exception):
    """A store backend failed. Distinct from "not found", which is None."""


class TaskStore(ABC):
    """Abstract base for task persistence.

    Lookups by identifier return None when the task does not exist.
    Backend failures raise StoreError.
    """

    @abstractmethod
    async def list_all(self) -> list[Task]:
        ...

    @abstractmethod
    async def get(self, task_id: str) -> Task | None:
        ...

    @abstractmethod
    async def insert(self, request: CreateTask) -> Task:
        """Persist a new task, assigning its identifier."""
        ...

    @abstractmethod
    async def update(self, task_id: str, status: bool) -> Task | None:
        """Set the status of an existing task and return its new state."""
        ...

    @abstractmethod
    async def delete(self, task_id: str) -> Task | None:
        """Remove a task and return its last known state."""
        ...


class InMemoryTaskStore(TaskStore):
    """Process-local store for development and tests. Keeps insertion order."""

    def __init__(self, tasks: list[Task] | None = None):
        self._tasks: dict[str, Task] = {t.id: Task(**t.to_dict()) for t in tasks or []}

    async def list_all(self) -> list[Task]:
        return [Task(**t.to_dict()) for t in self._tasks.values()]

    async def get(self, task_id: str) -> Task | None:
        task = self._tasks.get(task_id)
        return Task(**task.to_dict()) if task else None

    async def insert(self, request: CreateTask) -> Task:
        task = Task(id=str(uuid.uuid4()), task=request.task, status=False)
        self._tasks[task.id] = task
        return Task(**task.to_dict())

    async def update(self, task_id: str, status: bool) -> Task | None:
        task = self._tasks.get(task_id)
        if task is None:
            return None
        task.status = status
        return Task(**task.to_dict())

    async def delete(self, task_id: str) -> Task | None:
        task = self._tasks.pop(task_id, None)
        return Task(**task.to_dict()) if task else None
