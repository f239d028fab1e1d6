"""String-keyed persisted state.

The Orchestrator only sees the Storage protocol, so tests can hand it a
MemoryStorage while the CLI uses SQLite.
"""

import sqlite3
from typing import Protocol


class Storage(Protocol):
    def load(self, key: str) -> str | None: ...

    def save(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStorage:
    def __init__(self, initial: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(initial or {})

    def load(self, key: str) -> str | None:
        return self.data.get(key)

    def save(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class SqliteStorage:
    """Storage over the kv_state table. Writes commit immediately."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def load(self, key: str) -> str | None:
        row = self.conn.execute(
            "SELECT value FROM kv_state WHERE key = ?", (key,)
        ).fetchone()
        if row is None:
            return None
        return row[0]

    def save(self, key: str, value: str) -> None:
        self.conn.execute(
            "INSERT INTO kv_state (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP",
            (key, value),
        )
        self.conn.commit()

    def delete(self, key: str) -> None:
        self.conn.execute("DELETE FROM kv_state WHERE key = ?", (key,))
        self.conn.commit()
