"""
Process-wide application context.

Owns the database handle, the task store, the mutation service and the
subscriber hub. Created once at startup and closed at shutdown; entry points
receive it explicitly.
"""
from dataclasses import dataclass
from typing import Optional

from .config.logging import get_logger
from .config.settings import Settings
from .realtime.hub import SubscriberHub
from .storage.database import Database
from .storage.task_store import TaskStore
from .tasks.service import MutationService

logger = get_logger("context")


@dataclass
class AppContext:
    db: Database
    store: TaskStore
    service: MutationService
    hub: SubscriberHub

    @classmethod
    def start(cls, settings: Optional[Settings] = None) -> "AppContext":
        if settings is None:
            from .config.settings import settings as default_settings
            settings = default_settings

        db = Database(
            settings.database.path,
            wal_mode=settings.database.wal_mode,
            busy_timeout_ms=settings.database.busy_timeout_ms,
        )
        store = TaskStore(db)
        logger.info("Task store ready at %s", db.path)
        return cls(
            db=db,
            store=store,
            service=MutationService(store),
            hub=SubscriberHub(send_timeout=settings.server.broadcast_timeout_s),
        )

    def close(self) -> None:
        self.hub.clear()
        self.db.close()
        logger.info("Application context closed")
