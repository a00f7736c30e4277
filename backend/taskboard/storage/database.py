"""
Taskboard - Database Module

SQLite access with one connection per thread.
"""
import sqlite3
import logging
import threading
import json
from datetime import datetime, date, timezone
from pathlib import Path
from typing import Any, Optional, List, Union
from contextlib import contextmanager

from ..errors import StorageError
from .schema import init_schema

_db_logger = logging.getLogger("taskboard.database")


class Database:
    """
    SQLite handle shared by the process.

    Each thread lazily opens its own connection. The file is never removed
    or recreated here: a database that fails its integrity check stops startup.
    """

    def __init__(
        self,
        db_path: Optional[Union[str, Path]] = None,
        wal_mode: bool = True,
        busy_timeout_ms: int = 5000,
    ):
        if db_path is None:
            from ..config.settings import settings
            db_path = settings.database.path
            wal_mode = settings.database.wal_mode
            busy_timeout_ms = settings.database.busy_timeout_ms

        self._path = Path(db_path)
        self._wal_mode = wal_mode
        self._busy_timeout_ms = busy_timeout_ms
        self._local = threading.local()

        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._open()

    @property
    def path(self) -> Path:
        return self._path

    def _open(self) -> None:
        """Connect, verify the file and create the schema."""
        try:
            conn = self._conn()
            status = conn.execute("PRAGMA integrity_check").fetchone()[0]
            if status != "ok":
                raise sqlite3.DatabaseError(f"integrity_check returned: {status}")
            init_schema(conn)
        except sqlite3.Error as e:
            _db_logger.error("Database at %s is unusable: %s", self._path, e)
            self.close()
            raise StorageError(f"Database at {self._path} is unusable: {e}", cause=e) from e

    def _conn(self) -> sqlite3.Connection:
        conn = getattr(self._local, "connection", None)
        if conn is None:
            conn = sqlite3.connect(
                str(self._path),
                check_same_thread=False,
                timeout=self._busy_timeout_ms / 1000.0,
            )
            conn.row_factory = sqlite3.Row
            self._local.connection = conn

            conn.execute(f"PRAGMA journal_mode = {'WAL' if self._wal_mode else 'DELETE'}")
            conn.execute(f"PRAGMA busy_timeout = {self._busy_timeout_ms}")
            conn.execute("PRAGMA synchronous = NORMAL")
        return conn

    def execute(self, sql: str, params: tuple = ()) -> int:
        """Run a write statement; returns the affected row count."""
        conn = self._conn()
        cursor = conn.execute(sql, params)
        if not getattr(self._local, "in_transaction", False):
            conn.commit()
        return cursor.rowcount

    def fetch_one(self, sql: str, params: tuple = ()) -> Optional[sqlite3.Row]:
        return self._conn().execute(sql, params).fetchone()

    def fetch_all(self, sql: str, params: tuple = ()) -> List[sqlite3.Row]:
        return self._conn().execute(sql, params).fetchall()

    def fetch_value(self, sql: str, params: tuple = (), default: Any = None) -> Any:
        """First column of the first row, or ``default``."""
        row = self.fetch_one(sql, params)
        return default if row is None else row[0]

    @contextmanager
    def transaction(self, immediate: bool = False):
        """
        Group statements into one commit.

        With ``immediate=True`` the write lock is taken up front, so a
        read-modify-write inside the block cannot interleave with another writer.

        Usage:
            with db.transaction(immediate=True):
                row = db.fetch_one(...)
                db.execute(...)
        """
        conn = self._conn()
        if immediate:
            conn.execute("BEGIN IMMEDIATE")
        self._local.in_transaction = True
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self._local.in_transaction = False

    def close(self) -> None:
        """Close current thread's connection."""
        conn = getattr(self._local, "connection", None)
        if conn is not None:
            conn.close()
            self._local.connection = None


# JSON helpers

def to_json(obj: Any) -> str:
    """Serialize a document; datetimes become ISO strings."""
    def default(o):
        if isinstance(o, (datetime, date)):
            return o.isoformat()
        raise TypeError(f"Object of type {type(o)} is not JSON serializable")

    return json.dumps(obj, default=default, ensure_ascii=False)


def from_json(s: Optional[str]) -> Any:
    """Parse a document; None for None or empty string."""
    if not s:
        return None
    return json.loads(s)


def now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")
