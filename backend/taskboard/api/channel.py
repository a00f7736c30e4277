"""
Channel API

WebSocket entry point. Every connection is a broadcast subscriber for its
whole lifetime and may send ``newTask`` / ``updateTask`` / ``deleteTask``
frames.
"""
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from ..config.logging import get_logger
from ..context import AppContext
from ..realtime.channel import ChannelEventHandler
from .deps import get_context

logger = get_logger("api.channel")

router = APIRouter(tags=["channel"])


@router.websocket("/ws")
async def task_channel(
    websocket: WebSocket,
    context: AppContext = Depends(get_context),
):
    await websocket.accept()
    subscriber_id = context.hub.register(websocket)
    handler = ChannelEventHandler(context.service, context.hub)
    logger.info("Channel client connected: %s", subscriber_id)

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break
            await handler.handle_message(message, websocket.send_json)
    except WebSocketDisconnect:
        pass
    finally:
        context.hub.unregister(subscriber_id)
        logger.info("Channel client disconnected: %s", subscriber_id)
