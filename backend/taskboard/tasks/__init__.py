"""
Taskboard - Tasks

Validation and the mutation service shared by the REST routes and the channel.
"""
from .models import EventKind, TaskPatch, MutationOutcome, OUTBOUND_EVENTS
from .validator import validate_new_task, build_patch, extract_task_id
from .service import MutationService

__all__ = [
    "EventKind",
    "TaskPatch",
    "MutationOutcome",
    "OUTBOUND_EVENTS",
    "validate_new_task",
    "build_patch",
    "extract_task_id",
    "MutationService",
]
