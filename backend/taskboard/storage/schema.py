"""
Taskboard - Database Schema

Tasks are schema-open documents: the JSON body lives in ``doc`` and the
identifier is the only indexed key.
"""

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS tasks (
    id TEXT PRIMARY KEY,
    doc TEXT NOT NULL DEFAULT '{}',
    created_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now')),
    updated_at TEXT DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""


def init_schema(connection) -> None:
    """Initialize database schema."""
    connection.executescript(SCHEMA_SQL)
    connection.commit()
