"""
Task payload validation.

Create payloads are schema-open and pass through (minus any client id).
Update payloads are validated into ``TaskPatch``; empty values drop out.
"""
from typing import Any, Dict, Mapping

from pydantic import ValidationError

from ..errors import TaskValidationError
from .models import TaskPatch

ID_KEYS = ("id", "_id")


def validate_new_task(payload: Any) -> Dict[str, Any]:
    """Return the document to insert."""
    if not isinstance(payload, Mapping):
        raise TaskValidationError("Task payload must be an object")
    return {k: v for k, v in payload.items() if k not in ID_KEYS}


def _describe(error: ValidationError) -> str:
    first = error.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or "payload"
    return f"Field '{field}': {first['msg']}"


def build_patch(payload: Any) -> TaskPatch:
    """Validate an update payload into ``TaskPatch``."""
    if payload is None:
        return TaskPatch()
    if isinstance(payload, TaskPatch):
        return payload
    if not isinstance(payload, Mapping):
        raise TaskValidationError("Update payload must be an object")

    try:
        return TaskPatch.model_validate(dict(payload))
    except ValidationError as e:
        raise TaskValidationError(_describe(e), cause=e) from e


def extract_task_id(payload: Any) -> Any:
    """Identifier carried by a channel payload: a bare id or an object with id/_id."""
    if isinstance(payload, Mapping):
        for key in ID_KEYS:
            if payload.get(key) is not None:
                return payload[key]
        return None
    return payload
