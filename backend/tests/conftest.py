"""
Shared pytest fixtures for the Taskboard test suite.
"""
import pytest
from fastapi.testclient import TestClient

from taskboard.api.app import create_app
from taskboard.config.settings import Settings, DatabaseSettings
from taskboard.realtime.hub import SubscriberHub
from taskboard.storage import Database, TaskStore
from taskboard.tasks import MutationService


class FakeSubscriber:
    """Subscriber that records frames; ``fail=True`` makes every send raise."""

    def __init__(self, fail: bool = False):
        self.frames = []
        self.fail = fail

    async def send_json(self, data):
        if self.fail:
            raise RuntimeError("connection closed")
        self.frames.append(data)


@pytest.fixture
def db(tmp_path):
    """Fresh database for each test."""
    return Database(tmp_path / "test.sqlite3")


@pytest.fixture
def store(db):
    return TaskStore(db)


@pytest.fixture
def service(store):
    return MutationService(store)


@pytest.fixture
def hub():
    return SubscriberHub()


@pytest.fixture
def settings(tmp_path):
    return Settings(database=DatabaseSettings(path=tmp_path / "api.sqlite3"))


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    """Test client with lifespan running (context started)."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_subscriber():
    """Factory for recording subscribers."""
    return FakeSubscriber
