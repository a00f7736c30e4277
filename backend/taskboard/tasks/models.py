"""
Taskboard - Task Models

Mutation outcomes and the partial-update record.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, field_validator


class EventKind(str, Enum):
    """Kinds of broadcast-worthy task mutations."""
    TASK_CREATED = "TaskCreated"
    TASK_UPDATED = "TaskUpdated"
    TASK_DELETED = "TaskDeleted"

    @property
    def event_name(self) -> str:
        """Outbound channel event name."""
        return OUTBOUND_EVENTS[self]


# Creation reuses the inbound name; update/delete do not.
OUTBOUND_EVENTS = {
    EventKind.TASK_CREATED: "newTask",
    EventKind.TASK_UPDATED: "taskUpdated",
    EventKind.TASK_DELETED: "taskDeleted",
}


class TaskPatch(BaseModel):
    """
    Partial update of the recognized task fields.

    Empty or missing values become ``None``: the stored value is left unchanged.
    Unrecognized keys are ignored.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None

    model_config = {"frozen": True, "strict": True, "extra": "ignore"}

    @field_validator("title", "description", "category", mode="before")
    @classmethod
    def empty_is_absent(cls, value: Any) -> Any:
        if not value:
            return None
        return value

    def changes(self) -> Dict[str, str]:
        """Field -> value for every field actually supplied."""
        return self.model_dump(exclude_none=True)

    @property
    def is_empty(self) -> bool:
        return not self.changes()


@dataclass
class MutationOutcome:
    """
    Result of a create/update/delete.

    ``document`` is the canonical document: the created record, the update
    freshly read back from the store, or ``{"id": ...}`` for a delete.
    ``broadcast`` is set only when the store state actually changed.
    """
    kind: EventKind
    document: Dict[str, Any]
    broadcast: bool
    deleted_count: Optional[int] = None

    @property
    def event_name(self) -> str:
        return self.kind.event_name
