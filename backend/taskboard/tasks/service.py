"""
Mutation Service

Shared create/update/delete logic for both entry points. Callers get a
``MutationOutcome`` or a ``TaskError``; nothing is swallowed here and nothing
is broadcast here.
"""
from typing import Any, Dict, List

from ..config.logging import get_logger
from ..errors import InvalidTaskId, TaskNotFound
from ..storage.task_store import TaskStore, is_valid_task_id
from .models import EventKind, MutationOutcome
from .validator import validate_new_task, build_patch

logger = get_logger("tasks.service")


def _require_id(task_id: Any) -> str:
    if not is_valid_task_id(task_id):
        raise InvalidTaskId(task_id)
    return task_id


class MutationService:
    """Validates, persists and assembles canonical task documents."""

    def __init__(self, store: TaskStore):
        self.store = store

    # ==================== READS ====================

    def list_tasks(self) -> List[Dict[str, Any]]:
        return self.store.find_all()

    def get_task(self, task_id: Any) -> Dict[str, Any]:
        task_id = _require_id(task_id)
        task = self.store.find_by_id(task_id)
        if task is None:
            raise TaskNotFound(task_id)
        return task

    # ==================== MUTATIONS ====================

    def create(self, payload: Any) -> MutationOutcome:
        """Insert a task; the result is ``{id, **payload}``."""
        body = validate_new_task(payload)
        task_id = self.store.insert(body)
        logger.info("Task created: %s", task_id, extra={"extra_data": {"task_id": task_id}})
        return MutationOutcome(
            kind=EventKind.TASK_CREATED,
            document={"id": task_id, **body},
            broadcast=True,
        )

    def update(self, task_id: Any, payload: Any) -> MutationOutcome:
        """
        Apply a partial update.

        Raises TaskNotFound when nothing matched. A matched but unmodified
        document is returned as stored with ``broadcast=False``; a modified one
        is re-read from the store so the result never echoes client input.
        """
        task_id = _require_id(task_id)
        patch = build_patch(payload)

        result = self.store.update_by_id(task_id, patch.changes())
        if not result.matched:
            raise TaskNotFound(task_id)

        document = self.store.find_by_id(task_id)
        if document is None:
            # Deleted between the update and the read
            raise TaskNotFound(task_id)

        if not result.modified:
            logger.debug("Task update was a no-op: %s", task_id)
        else:
            logger.info(
                "Task updated: %s", task_id,
                extra={"extra_data": {"task_id": task_id, "fields": sorted(patch.changes())}},
            )

        return MutationOutcome(
            kind=EventKind.TASK_UPDATED,
            document=document,
            broadcast=bool(result.modified),
        )

    def delete(self, task_id: Any) -> MutationOutcome:
        """
        Delete a task. Deleting a missing task succeeds with count 0 and no broadcast.

        The broadcast carries the id exactly as the caller sent it.
        """
        task_id = _require_id(task_id)
        deleted = self.store.delete_by_id(task_id)

        if deleted:
            logger.info("Task deleted: %s", task_id, extra={"extra_data": {"task_id": task_id}})
        else:
            logger.debug("Task delete matched nothing: %s", task_id)

        return MutationOutcome(
            kind=EventKind.TASK_DELETED,
            document={"id": task_id},
            broadcast=deleted > 0,
            deleted_count=deleted,
        )
