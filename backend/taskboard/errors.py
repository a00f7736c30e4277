"""
Task error taxonomy.

Each error carries a stable ``code`` and the HTTP ``status_code`` the request
entry point answers with. The channel entry point reuses ``code`` in its
``taskError`` acknowledgment.
"""
from typing import Optional


class TaskError(Exception):
    """Base class for task mutation/lookup failures."""

    code = "task_error"
    status_code = 500

    def __init__(self, message: str, *, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def to_dict(self) -> dict:
        return {"message": self.message, "error": self.code}


class InvalidTaskId(TaskError):
    """Identifier is malformed; raised before the store is queried."""

    code = "invalid_id"
    status_code = 400

    def __init__(self, task_id=None):
        super().__init__("Invalid Task ID")
        self.task_id = task_id


class TaskNotFound(TaskError):
    """Well-formed identifier with no matching document."""

    code = "not_found"
    status_code = 404

    def __init__(self, task_id: str):
        super().__init__("Task not found")
        self.task_id = task_id


class TaskValidationError(TaskError):
    """Malformed create/update payload."""

    code = "validation_error"
    status_code = 422


class StorageError(TaskError):
    """Underlying store operation failed or timed out."""

    code = "storage_error"
    status_code = 500
