"""
Taskboard - Realtime

Subscriber registry, broadcast fan-out and the channel event handler.
"""
from .hub import SubscriberHub, Subscriber, make_frame
from .channel import (
    ChannelEventHandler,
    error_frame,
    NEW_TASK,
    UPDATE_TASK,
    DELETE_TASK,
    ERROR_EVENT,
    INBOUND_EVENTS,
)

__all__ = [
    "SubscriberHub",
    "Subscriber",
    "make_frame",
    "ChannelEventHandler",
    "error_frame",
    "NEW_TASK",
    "UPDATE_TASK",
    "DELETE_TASK",
    "ERROR_EVENT",
    "INBOUND_EVENTS",
]
