"""
Taskboard API Layer

REST and WebSocket entry points sharing one mutation service.

Run:
    python run_api.py
    # or
    uvicorn taskboard.api.app:app --reload

Endpoints:
    GET    /            - Liveness text
    GET    /health      - Store and subscriber check

    POST   /task        - Create task
    GET    /task        - List tasks
    GET    /task/{id}   - Get task
    PUT    /task/{id}   - Update title/description/category
    DELETE /task/{id}   - Delete task

    WS     /ws          - Channel: newTask / updateTask / deleteTask in,
                          newTask / taskUpdated / taskDeleted broadcast out
"""

from .app import create_app, app
from .tasks import router as tasks_router
from .channel import router as channel_router

__all__ = [
    "create_app",
    "app",
    "tasks_router",
    "channel_router",
]
