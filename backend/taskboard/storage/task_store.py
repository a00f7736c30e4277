"""
Task document store.

Wraps the ``tasks`` table as a collection of schema-open JSON documents keyed
by an ObjectId-shaped identifier. Every operation touches a single document
and is atomic on its own; nothing here spans more than one task.
"""
import itertools
import re
import secrets
import sqlite3
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from ..errors import InvalidTaskId, StorageError
from .database import Database, to_json, from_json, now_iso

_ID_RE = re.compile(r"^[0-9a-fA-F]{24}$")

# ObjectId layout: 4-byte timestamp, 5 random bytes per process, 3-byte counter
_PROCESS_RANDOM = secrets.token_bytes(5)
_counter = itertools.count(secrets.randbelow(0xFFFFFF))


def new_task_id() -> str:
    """Generate a new 24-hex task identifier."""
    ts = int(time.time()).to_bytes(4, "big")
    count = (next(_counter) & 0xFFFFFF).to_bytes(3, "big")
    return (ts + _PROCESS_RANDOM + count).hex()


def is_valid_task_id(value: Any) -> bool:
    """True if value is a well-formed task identifier."""
    return isinstance(value, str) and bool(_ID_RE.match(value))


@dataclass(frozen=True)
class MatchResult:
    """Outcome of a single-document update."""
    matched: int
    modified: int


class TaskStore:
    """Single-collection document store for tasks."""

    def __init__(self, db: Database):
        self._db = db

    @staticmethod
    def _require_valid(task_id: Any) -> str:
        if not is_valid_task_id(task_id):
            raise InvalidTaskId(task_id)
        return task_id.lower()

    @staticmethod
    def _to_document(row) -> Dict[str, Any]:
        body = from_json(row["doc"]) or {}
        return {"id": row["id"], **body}

    def insert(self, document: Mapping[str, Any]) -> str:
        """Insert a new document; the store assigns and returns its id."""
        body = {k: v for k, v in document.items() if k != "id"}
        task_id = new_task_id()
        ts = now_iso()
        try:
            self._db.execute(
                "INSERT INTO tasks (id, doc, created_at, updated_at) VALUES (?, ?, ?, ?)",
                (task_id, to_json(body), ts, ts),
            )
        except (sqlite3.Error, TypeError, ValueError) as e:
            raise StorageError(f"Error inserting task: {e}", cause=e) from e
        return task_id

    def find_all(self) -> List[Dict[str, Any]]:
        """All documents in insertion order."""
        try:
            rows = self._db.fetch_all("SELECT id, doc FROM tasks ORDER BY rowid")
        except sqlite3.Error as e:
            raise StorageError(f"Error listing tasks: {e}", cause=e) from e
        return [self._to_document(row) for row in rows]

    def find_by_id(self, task_id: Any) -> Optional[Dict[str, Any]]:
        """Document by id, or None if there is none."""
        task_id = self._require_valid(task_id)
        try:
            row = self._db.fetch_one("SELECT id, doc FROM tasks WHERE id = ?", (task_id,))
        except sqlite3.Error as e:
            raise StorageError(f"Error reading task: {e}", cause=e) from e
        if row is None:
            return None
        return self._to_document(row)

    def update_by_id(self, task_id: Any, fields: Mapping[str, Any]) -> MatchResult:
        """
        Set ``fields`` on the document.

        ``modified`` is 0 when the document already holds exactly those values,
        including the empty-fields case.
        """
        task_id = self._require_valid(task_id)
        try:
            with self._db.transaction(immediate=True):
                row = self._db.fetch_one("SELECT doc FROM tasks WHERE id = ?", (task_id,))
                if row is None:
                    return MatchResult(matched=0, modified=0)

                current = from_json(row["doc"]) or {}
                merged = {**current, **fields}
                if merged == current:
                    return MatchResult(matched=1, modified=0)

                self._db.execute(
                    "UPDATE tasks SET doc = ?, updated_at = ? WHERE id = ?",
                    (to_json(merged), now_iso(), task_id),
                )
                return MatchResult(matched=1, modified=1)
        except (sqlite3.Error, TypeError, ValueError) as e:
            raise StorageError(f"Error updating task: {e}", cause=e) from e

    def delete_by_id(self, task_id: Any) -> int:
        """Delete the document; returns the deleted count (0 or 1)."""
        task_id = self._require_valid(task_id)
        try:
            return self._db.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        except sqlite3.Error as e:
            raise StorageError(f"Error deleting task: {e}", cause=e) from e

    def count(self) -> int:
        try:
            return self._db.fetch_value("SELECT COUNT(*) FROM tasks", default=0)
        except sqlite3.Error as e:
            raise StorageError(f"Error counting tasks: {e}", cause=e) from e
