"""
Notification fan-out.

``SubscriberHub`` is the live-subscriber registry. Broadcasts are best effort
at the time of the call: no acknowledgment, no replay for late subscribers,
and the originator of a mutation is a subscriber like any other.
"""
import asyncio
import uuid
from typing import Any, Dict, List, Optional, Protocol

from starlette.websockets import WebSocketState

from ..config.logging import get_logger
from ..tasks.models import EventKind, MutationOutcome

logger = get_logger("realtime.hub")


class Subscriber(Protocol):
    async def send_json(self, data: Any) -> None:
        ...


def make_frame(event: str, data: Any) -> Dict[str, Any]:
    """Wire frame for the channel: ``{"event": ..., "data": ...}``."""
    return {"event": event, "data": data}


def _is_open(subscriber: Subscriber) -> bool:
    state = getattr(subscriber, "application_state", None)
    return state is None or state == WebSocketState.CONNECTED


class SubscriberHub:
    """Registry of connected subscribers with broadcast."""

    def __init__(self, send_timeout: float = 5.0):
        self.send_timeout = send_timeout
        self._subscribers: Dict[str, Subscriber] = {}

    @property
    def count(self) -> int:
        return len(self._subscribers)

    def register(self, subscriber: Subscriber, subscriber_id: Optional[str] = None) -> str:
        subscriber_id = subscriber_id or uuid.uuid4().hex[:8]
        self._subscribers[subscriber_id] = subscriber
        logger.debug("Subscriber registered: %s (total %d)", subscriber_id, self.count)
        return subscriber_id

    def unregister(self, subscriber_id: str) -> None:
        if self._subscribers.pop(subscriber_id, None) is not None:
            logger.debug("Subscriber removed: %s (total %d)", subscriber_id, self.count)

    def clear(self) -> None:
        self._subscribers.clear()

    async def _deliver(self, subscriber_id: str, subscriber: Subscriber, frame: Dict[str, Any]) -> bool:
        try:
            await asyncio.wait_for(subscriber.send_json(frame), timeout=self.send_timeout)
            return True
        except asyncio.TimeoutError:
            logger.debug("Delivery to %s timed out after %.1fs", subscriber_id, self.send_timeout)
        except Exception as e:
            logger.debug("Delivery to %s failed: %s", subscriber_id, e)
        return False

    async def broadcast(self, kind: EventKind, document: Dict[str, Any]) -> int:
        """
        Send ``kind``'s event to every current subscriber concurrently.

        Returns the number of subscribers the frame was handed to. Closed,
        failing or slower-than-``send_timeout`` subscribers are skipped and
        dropped from the registry.
        """
        frame = make_frame(kind.event_name, document)

        # Snapshot: subscribers may come and go while we await sends
        targets = []
        dead: List[str] = []
        for subscriber_id, subscriber in list(self._subscribers.items()):
            if _is_open(subscriber):
                targets.append((subscriber_id, subscriber))
            else:
                dead.append(subscriber_id)

        results = await asyncio.gather(
            *(self._deliver(sid, sub, frame) for sid, sub in targets),
            return_exceptions=True,
        )

        delivered = 0
        for (subscriber_id, _), ok in zip(targets, results):
            if ok is True:
                delivered += 1
            else:
                dead.append(subscriber_id)

        for subscriber_id in dead:
            self.unregister(subscriber_id)

        logger.debug(
            "Broadcast %s to %d subscriber(s)", frame["event"], delivered,
            extra={"extra_data": {"event": frame["event"], "delivered": delivered}},
        )
        return delivered

    async def publish(self, outcome: MutationOutcome) -> int:
        """Broadcast a mutation outcome if it changed stored state."""
        if not outcome.broadcast:
            return 0
        return await self.broadcast(outcome.kind, outcome.document)
