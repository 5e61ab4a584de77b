"""DynamoDB-backed task store."""

import asyncio
import uuid

from botocore.exceptions import BotoCoreError, ClientError

from task_api.tasks.models import CreateTask, Task
from task_api.tasks.store import StoreError, TaskStore


class DynamoDBTaskStore(TaskStore):
    """Stores tasks as items keyed by ``id`` in a single DynamoDB table."""

    def __init__(self, table_name: str, region: str = "us-east-1"):
        self._table_name = table_name
        self._region = region
        self._table = None

    def _get_table(self):
        """Lazy-init boto3 Table resource."""
        if self._table is None:
            import boto3

            dynamodb = boto3.resource("dynamodb", region_name=self._region)
            self._table = dynamodb.Table(self._table_name)
        return self._table

    async def _run(self, func, *args):
        """Run a blocking table call off the event loop, wrapping AWS errors."""
        try:
            return await asyncio.to_thread(func, *args)
        except (BotoCoreError, ClientError) as exc:
            raise StoreError(f"DynamoDB {func.__name__} failed on {self._table_name}: {exc}") from exc

    async def list_all(self) -> list[Task]:
        items = await self._run(self._scan_all)
        return [Task.from_item(item) for item in items]

    async def get(self, task_id: str) -> Task | None:
        item = await self._run(self._get_item, task_id)
        return Task.from_item(item) if item else None

    async def insert(self, request: CreateTask) -> Task:
        task = Task(id=str(uuid.uuid4()), task=request.task, status=False)
        await self._run(self._put_item, task.to_dict())
        return task

    async def update(self, task_id: str, status: bool) -> Task | None:
        item = await self._run(self._update_status, task_id, status)
        return Task.from_item(item) if item else None

    async def delete(self, task_id: str) -> Task | None:
        item = await self._run(self._delete_item, task_id)
        return Task.from_item(item) if item else None

    # --- blocking boto3 calls ---

    def _scan_all(self) -> list[dict]:
        """Scan the whole table, following pagination."""
        table = self._get_table()
        items: list[dict] = []
        kwargs: dict = {}
        while True:
            resp = table.scan(**kwargs)
            items.extend(resp.get("Items", []))
            last_key = resp.get("LastEvaluatedKey")
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key

    def _get_item(self, task_id: str) -> dict | None:
        resp = self._get_table().get_item(Key={"id": task_id})
        return resp.get("Item")

    def _put_item(self, item: dict) -> None:
        self._get_table().put_item(
            Item=item,
            ConditionExpression="attribute_not_exists(#id)",
            ExpressionAttributeNames={"#id": "id"},
        )

    def _update_status(self, task_id: str, status: bool) -> dict | None:
        """Set status on an existing item. Returns None if the id is unknown."""
        try:
            resp = self._get_table().update_item(
                Key={"id": task_id},
                UpdateExpression="SET #status = :status",
                ConditionExpression="attribute_exists(#id)",
                ExpressionAttributeNames={"#id": "id", "#status": "status"},
                ExpressionAttributeValues={":status": status},
                ReturnValues="ALL_NEW",
            )
        except ClientError as exc:
            if _error_code(exc) == "ConditionalCheckFailedException":
                return None
            raise
        return resp.get("Attributes")

    def _delete_item(self, task_id: str) -> dict | None:
        resp = self._get_table().delete_item(
            Key={"id": task_id},
            ReturnValues="ALL_OLD",
        )
        # ALL_OLD comes back without Attributes when nothing was deleted
        return resp.get("Attributes")


def _error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "")
