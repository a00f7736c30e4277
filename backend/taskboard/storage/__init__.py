"""
Taskboard - Storage Layer

SQLite connection management and the task document store.
"""
from .database import Database, to_json, from_json, now_iso
from .schema import init_schema, SCHEMA_SQL
from .task_store import TaskStore, MatchResult, new_task_id, is_valid_task_id

__all__ = [
    # Database
    "Database",
    "to_json",
    "from_json",
    "now_iso",
    # Schema
    "init_schema",
    "SCHEMA_SQL",
    # Tasks
    "TaskStore",
    "MatchResult",
    "new_task_id",
    "is_valid_task_id",
]
