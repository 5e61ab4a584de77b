"""Task records and request payloads."""

from dataclasses import asdict, dataclass

from pydantic import BaseModel, ConfigDict, Field, StrictStr


@dataclass
class Task:
    id: str
    task: str
    status: bool = False  # True = done

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_item(cls, item: dict) -> "Task":
        """Build a Task from a stored item, tolerating missing status."""
        return cls(
            id=str(item["id"]),
            task=item["task"],
            status=bool(item.get("status", False)),
        )


class CreateTask(BaseModel):
    """Body of POST /api/task. Unknown fields are ignored."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    task: StrictStr = Field(min_length=1)
