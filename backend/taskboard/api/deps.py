"""
API Dependencies

Everything comes from the ``AppContext`` stored on ``app.state`` at startup.
"""
from fastapi import Depends
from starlette.requests import HTTPConnection

from ..context import AppContext
from ..realtime.hub import SubscriberHub
from ..tasks.service import MutationService


def get_context(connection: HTTPConnection) -> AppContext:
    """Application context for HTTP requests and WebSocket connections alike."""
    context = getattr(connection.app.state, "context", None)
    if context is None:
        raise RuntimeError("Application context is not started")
    return context


def get_service(context: AppContext = Depends(get_context)) -> MutationService:
    return context.service


def get_hub(context: AppContext = Depends(get_context)) -> SubscriberHub:
    return context.hub
