"""
Tasks API

REST entry point for task CRUD. Successful mutations are broadcast to every
channel subscriber before the response is sent.
"""
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends

from ..realtime.hub import SubscriberHub
from ..tasks.models import TaskPatch
from ..tasks.service import MutationService
from .deps import get_service, get_hub
from .models import DeleteResult, ERROR_RESPONSES


router = APIRouter(prefix="/task", tags=["tasks"], responses=ERROR_RESPONSES)


@router.post("")
async def create_task(
    payload: Any = Body(None),
    service: MutationService = Depends(get_service),
    hub: SubscriberHub = Depends(get_hub),
) -> Dict[str, Any]:
    """Create a task. Any fields are stored as given; the id is assigned."""
    outcome = service.create(payload)
    await hub.publish(outcome)
    return outcome.document


@router.get("")
async def list_tasks(
    service: MutationService = Depends(get_service),
) -> List[Dict[str, Any]]:
    """All tasks."""
    return service.list_tasks()


@router.get("/{task_id}")
async def get_task(
    task_id: str,
    service: MutationService = Depends(get_service),
) -> Dict[str, Any]:
    """Get single task by ID."""
    return service.get_task(task_id)


@router.put("/{task_id}")
async def update_task(
    task_id: str,
    payload: Optional[TaskPatch] = Body(None),
    service: MutationService = Depends(get_service),
    hub: SubscriberHub = Depends(get_hub),
) -> Dict[str, Any]:
    """
    Update title, description and/or category.

    Empty or missing fields keep their stored value. Returns the task as
    stored after the update; subscribers are notified only if it changed.
    """
    outcome = service.update(task_id, payload)
    await hub.publish(outcome)
    return outcome.document


@router.delete("/{task_id}", response_model=DeleteResult, response_model_by_alias=True)
async def delete_task(
    task_id: str,
    service: MutationService = Depends(get_service),
    hub: SubscriberHub = Depends(get_hub),
):
    """Delete a task. Deleting a missing task reports ``deletedCount: 0``."""
    outcome = service.delete(task_id)
    await hub.publish(outcome)
    return DeleteResult(deleted_count=outcome.deleted_count or 0)
