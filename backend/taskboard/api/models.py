"""
API Response Models
"""
from typing import Any, Dict

from pydantic import BaseModel, Field


class DeleteResult(BaseModel):
    """Deletion result; ``deletedCount`` is 0 when the task did not exist."""
    acknowledged: bool = True
    deleted_count: int = Field(0, alias="deletedCount")

    model_config = {"populate_by_name": True}


class ErrorResponse(BaseModel):
    """Error body for 4xx/5xx answers."""
    message: str
    error: str


class HealthResponse(BaseModel):
    status: str
    checks: Dict[str, Any] = Field(default_factory=dict)


ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid task id"},
    404: {"model": ErrorResponse, "description": "Task not found"},
    422: {"model": ErrorResponse, "description": "Invalid payload"},
    500: {"model": ErrorResponse, "description": "Storage error"},
}
