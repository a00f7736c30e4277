"""
Channel event handler.

Translates inbound channel events into mutation service calls. Success is
announced through the hub broadcast only (the sender receives its own copy
like every other subscriber). Failures are answered with a ``taskError``
frame to the sending connection and never broadcast.
"""
import json
from typing import Any, Awaitable, Callable, Dict, Optional

from ..config.logging import get_logger, log_error
from ..errors import TaskError
from ..tasks.models import MutationOutcome
from ..tasks.service import MutationService
from ..tasks.validator import extract_task_id
from .hub import SubscriberHub, make_frame

logger = get_logger("realtime.channel")

NEW_TASK = "newTask"
UPDATE_TASK = "updateTask"
DELETE_TASK = "deleteTask"
ERROR_EVENT = "taskError"

INBOUND_EVENTS = (NEW_TASK, UPDATE_TASK, DELETE_TASK)

Reply = Callable[[Dict[str, Any]], Awaitable[None]]


def error_frame(event: Optional[str], code: str, message: str) -> Dict[str, Any]:
    return make_frame(ERROR_EVENT, {"event": event, "error": code, "message": message})


class ChannelEventHandler:
    """Dispatches ``newTask`` / ``updateTask`` / ``deleteTask`` frames."""

    def __init__(self, service: MutationService, hub: SubscriberHub):
        self.service = service
        self.hub = hub

    def _dispatch(self, event: str, data: Any) -> MutationOutcome:
        if event == NEW_TASK:
            return self.service.create(data)
        if event == UPDATE_TASK:
            return self.service.update(extract_task_id(data), data)
        return self.service.delete(extract_task_id(data))

    async def handle_message(self, message: Dict[str, Any], reply: Reply) -> Optional[MutationOutcome]:
        """Handle one ASGI ``websocket.receive`` message; only text frames carry events."""
        text = message.get("text")
        if text is None:
            await reply(error_frame(None, "bad_frame", "Only text frames are accepted"))
            return None
        return await self.handle_text(text, reply)

    async def handle_text(self, raw: str, reply: Reply) -> Optional[MutationOutcome]:
        """Handle one raw text frame."""
        try:
            frame = json.loads(raw)
        except ValueError:
            await reply(error_frame(None, "bad_frame", "Frame is not valid JSON"))
            return None
        return await self.handle(frame, reply)

    async def handle(self, frame: Any, reply: Reply) -> Optional[MutationOutcome]:
        """
        Handle one decoded frame ``{"event": name, "data": payload}``.

        Returns the outcome on success, None when an error was acknowledged.
        """
        if not isinstance(frame, dict) or not isinstance(frame.get("event"), str):
            await reply(error_frame(None, "bad_frame", "Frame must be an object with an 'event' name"))
            return None

        event = frame["event"]
        if event not in INBOUND_EVENTS:
            await reply(error_frame(event, "unknown_event", f"Unknown event '{event}'"))
            return None

        try:
            outcome = self._dispatch(event, frame.get("data"))
        except TaskError as e:
            logger.info("Channel event %s rejected: %s", event, e.code)
            await reply(error_frame(event, e.code, e.message))
            return None
        except Exception as e:
            log_error(logger, e, context=f"channel event {event}")
            await reply(error_frame(event, "internal_error", "Internal server error"))
            return None

        await self.hub.publish(outcome)
        return outcome
