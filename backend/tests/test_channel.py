"""
Tests for the channel event handler.
"""
import json

import pytest

from taskboard.realtime import ChannelEventHandler
from taskboard.storage import new_task_id



class Replies:
    def __init__(self):
        self.frames = []

    async def __call__(self, frame):
        self.frames.append(frame)


@pytest.fixture
def handler(service, hub):
    return ChannelEventHandler(service, hub)


@pytest.fixture
def subscriber(hub, make_subscriber):
    sub = make_subscriber()
    hub.register(sub)
    return sub


@pytest.fixture
def reply():
    return Replies()


class TestChannelEvents:

    @pytest.mark.asyncio
    async def test_new_task_broadcasts(self, handler, subscriber, reply, store):
        outcome = await handler.handle({"event": "newTask", "data": {"title": "A"}}, reply)

        task_id = outcome.document["id"]
        assert subscriber.frames == [{"event": "newTask", "data": {"id": task_id, "title": "A"}}]
        assert reply.frames == []
        assert store.find_by_id(task_id)["title"] == "A"

    @pytest.mark.asyncio
    async def test_update_task_broadcasts_full_document(self, handler, service, subscriber, reply):
        task_id = service.create({"title": "A", "description": "d"}).document["id"]

        await handler.handle(
            {"event": "updateTask", "data": {"id": task_id, "category": "c"}}, reply
        )

        assert subscriber.frames == [{
            "event": "taskUpdated",
            "data": {"id": task_id, "title": "A", "description": "d", "category": "c"},
        }]

    @pytest.mark.asyncio
    async def test_update_accepts_underscore_id(self, handler, service, subscriber, reply):
        task_id = service.create({"title": "A"}).document["id"]

        await handler.handle({"event": "updateTask", "data": {"_id": task_id, "title": "B"}}, reply)

        assert subscriber.frames[0]["data"]["title"] == "B"

    @pytest.mark.asyncio
    async def test_noop_update_not_broadcast(self, handler, service, subscriber, reply):
        task_id = service.create({"title": "A"}).document["id"]

        outcome = await handler.handle(
            {"event": "updateTask", "data": {"id": task_id, "title": "A"}}, reply
        )

        assert outcome.broadcast is False
        assert subscriber.frames == []
        assert reply.frames == []

    @pytest.mark.asyncio
    async def test_delete_task_broadcasts_id(self, handler, service, subscriber, reply):
        task_id = service.create({"title": "A"}).document["id"]

        await handler.handle({"event": "deleteTask", "data": task_id}, reply)

        assert subscriber.frames == [{"event": "taskDeleted", "data": {"id": task_id}}]

    @pytest.mark.asyncio
    async def test_delete_missing_is_silent(self, handler, subscriber, reply):
        outcome = await handler.handle({"event": "deleteTask", "data": new_task_id()}, reply)

        assert outcome.deleted_count == 0
        assert subscriber.frames == []
        assert reply.frames == []


class TestChannelErrors:

    @pytest.mark.asyncio
    async def test_invalid_id_acknowledged_to_sender_only(self, handler, subscriber, reply):
        outcome = await handler.handle({"event": "deleteTask", "data": "bad-id"}, reply)

        assert outcome is None
        assert subscriber.frames == []
        assert reply.frames == [{
            "event": "taskError",
            "data": {"event": "deleteTask", "error": "invalid_id", "message": "Invalid Task ID"},
        }]

    @pytest.mark.asyncio
    async def test_update_missing_task(self, handler, subscriber, reply):
        await handler.handle(
            {"event": "updateTask", "data": {"id": new_task_id(), "title": "x"}}, reply
        )

        assert subscriber.frames == []
        assert reply.frames[0]["data"]["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_new_task_invalid_payload(self, handler, subscriber, reply):
        await handler.handle({"event": "newTask", "data": "just text"}, reply)

        assert subscriber.frames == []
        assert reply.frames[0]["data"]["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_unknown_event(self, handler, reply):
        await handler.handle({"event": "taskUpdated", "data": {}}, reply)

        assert reply.frames[0]["data"] == {
            "event": "taskUpdated",
            "error": "unknown_event",
            "message": "Unknown event 'taskUpdated'",
        }

    @pytest.mark.asyncio
    @pytest.mark.parametrize("frame", [[], "newTask", {"data": {}}, {"event": 1}])
    async def test_malformed_frame(self, handler, reply, frame):
        assert await handler.handle(frame, reply) is None
        assert reply.frames[0]["data"]["error"] == "bad_frame"

    @pytest.mark.asyncio
    async def test_non_json_text(self, handler, reply):
        assert await handler.handle_text("{not json", reply) is None
        assert reply.frames[0]["data"]["error"] == "bad_frame"

    @pytest.mark.asyncio
    async def test_handle_text_dispatches(self, handler, subscriber, reply):
        raw = json.dumps({"event": "newTask", "data": {"title": "A"}})

        outcome = await handler.handle_text(raw, reply)

        assert outcome is not None
        assert subscriber.frames[0]["event"] == "newTask"

    @pytest.mark.asyncio
    async def test_storage_error_acknowledged(self, handler, db, subscriber, reply):
        db.execute("DROP TABLE tasks")

        await handler.handle({"event": "newTask", "data": {"title": "A"}}, reply)

        assert subscriber.frames == []
        assert reply.frames[0]["data"]["error"] == "storage_error"

    @pytest.mark.asyncio
    async def test_binary_message_rejected(self, handler, subscriber, reply):
        message = {"type": "websocket.receive", "bytes": b"\x00\x01"}

        assert await handler.handle_message(message, reply) is None
        assert subscriber.frames == []
        assert reply.frames[0]["data"]["error"] == "bad_frame"

    @pytest.mark.asyncio
    async def test_text_message_dispatches(self, handler, subscriber, reply):
        message = {"type": "websocket.receive", "text": '{"event": "newTask", "data": {"title": "A"}}'}

        outcome = await handler.handle_message(message, reply)

        assert outcome is not None
        assert subscriber.frames[0]["event"] == "newTask"
