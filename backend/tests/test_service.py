"""
Tests for the mutation service.
"""
import pytest

from taskboard.errors import InvalidTaskId, TaskNotFound, TaskValidationError, StorageError
from taskboard.storage import new_task_id
from taskboard.tasks import EventKind, MutationService


class TestCreate:

    def test_create_returns_id_and_payload(self, service, store):
        outcome = service.create({"title": "Buy milk"})

        assert outcome.kind == EventKind.TASK_CREATED
        assert outcome.broadcast is True
        assert outcome.event_name == "newTask"
        task_id = outcome.document["id"]
        assert outcome.document == {"id": task_id, "title": "Buy milk"}
        assert store.find_by_id(task_id) == outcome.document

    def test_create_keeps_extra_fields(self, service, store):
        outcome = service.create({"title": "A", "priority": 2})
        assert store.find_by_id(outcome.document["id"])["priority"] == 2

    def test_create_rejects_non_object(self, service):
        with pytest.raises(TaskValidationError):
            service.create(None)

    def test_storage_failure_propagates(self, service, db):
        db.execute("DROP TABLE tasks")
        with pytest.raises(StorageError):
            service.create({"title": "A"})


class TestUpdate:

    @pytest.fixture
    def task_id(self, service):
        return service.create({
            "title": "Buy milk",
            "description": "2 liters",
        }).document["id"]

    def test_partial_update_keeps_other_fields(self, service, task_id):
        outcome = service.update(task_id, {"category": "errands"})

        assert outcome.kind == EventKind.TASK_UPDATED
        assert outcome.broadcast is True
        assert outcome.event_name == "taskUpdated"
        assert outcome.document == {
            "id": task_id,
            "title": "Buy milk",
            "description": "2 liters",
            "category": "errands",
        }

    def test_identical_values_not_broadcast(self, service, task_id):
        outcome = service.update(task_id, {"title": "Buy milk"})

        assert outcome.broadcast is False
        assert outcome.document["title"] == "Buy milk"

    def test_empty_patch_not_broadcast(self, service, task_id):
        outcome = service.update(task_id, {"title": "", "category": None})

        assert outcome.broadcast is False
        assert outcome.document == {"id": task_id, "title": "Buy milk", "description": "2 liters"}

    def test_result_is_fresh_read(self, service, store, task_id):
        class RacingStore:
            """Another writer changes description right after our update."""

            def __getattr__(self, name):
                return getattr(store, name)

            def update_by_id(self, tid, fields):
                result = store.update_by_id(tid, fields)
                store.update_by_id(tid, {"description": "changed elsewhere"})
                return result

        racing = MutationService(RacingStore())

        outcome = racing.update(task_id, {"title": "X"})

        assert outcome.document["title"] == "X"
        assert outcome.document["description"] == "changed elsewhere"

    def test_missing_task(self, service):
        with pytest.raises(TaskNotFound):
            service.update(new_task_id(), {"title": "x"})

    def test_invalid_id(self, service):
        with pytest.raises(InvalidTaskId):
            service.update("not-a-valid-id", {"title": "x"})

    def test_invalid_id_checked_before_payload(self, service):
        with pytest.raises(InvalidTaskId):
            service.update("bad", ["not", "an", "object"])

    def test_uppercase_id_accepted(self, service, task_id):
        outcome = service.update(task_id.upper(), {"category": "c"})
        assert outcome.document["id"] == task_id


class TestDelete:

    def test_delete_existing(self, service):
        task_id = service.create({"title": "A"}).document["id"]

        outcome = service.delete(task_id)

        assert outcome.kind == EventKind.TASK_DELETED
        assert outcome.event_name == "taskDeleted"
        assert outcome.broadcast is True
        assert outcome.deleted_count == 1
        assert outcome.document == {"id": task_id}

    def test_delete_is_idempotent(self, service):
        task_id = service.create({"title": "A"}).document["id"]
        service.delete(task_id)

        outcome = service.delete(task_id)

        assert outcome.deleted_count == 0
        assert outcome.broadcast is False

    def test_delete_never_existing(self, service):
        outcome = service.delete(new_task_id())
        assert outcome.deleted_count == 0
        assert outcome.broadcast is False

    def test_delete_echoes_id_as_sent(self, service):
        task_id = service.create({"title": "A"}).document["id"]

        outcome = service.delete(task_id.upper())

        assert outcome.deleted_count == 1
        assert outcome.document == {"id": task_id.upper()}

    def test_delete_invalid_id(self, service):
        with pytest.raises(InvalidTaskId):
            service.delete("nope")

    def test_get_after_delete_not_found(self, service):
        task_id = service.create({"title": "A"}).document["id"]
        service.delete(task_id)

        with pytest.raises(TaskNotFound):
            service.get_task(task_id)


class TestReads:

    def test_list_tasks(self, service):
        service.create({"title": "A"})
        service.create({"title": "B"})
        assert [t["title"] for t in service.list_tasks()] == ["A", "B"]

    def test_get_task_invalid_id(self, service):
        with pytest.raises(InvalidTaskId):
            service.get_task("not-a-valid-id")
