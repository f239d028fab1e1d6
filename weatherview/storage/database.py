"""SQLite connection for local state, with versioned migrations."""

import importlib
import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

MIGRATIONS_PACKAGE = "weatherview.storage.migrations"
MIGRATIONS_DIR = Path(__file__).parent / "migrations"


def connect(db_path: str | Path) -> sqlite3.Connection:
    """Open the state database in WAL mode, creating its directory if needed."""
    if str(db_path) != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    return conn


def run_migrations(conn: sqlite3.Connection) -> list[str]:
    """Apply every v###_*.py module not yet recorded in schema_versions.

    Each migration and its version row commit together. Returns the names
    applied by this call.
    """
    with conn:
        conn.execute(
            "CREATE TABLE IF NOT EXISTS schema_versions ("
            "  version TEXT PRIMARY KEY,"
            "  applied_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP"
            ")"
        )
    done = {row["version"] for row in conn.execute("SELECT version FROM schema_versions")}

    pending = [name for name in available_migrations() if name not in done]
    for name in pending:
        module = importlib.import_module(f"{MIGRATIONS_PACKAGE}.{name}")
        with conn:
            module.up(conn)
            conn.execute("INSERT INTO schema_versions (version) VALUES (?)", (name,))
        logger.info("Applied migration %s", name)
    return pending


def available_migrations() -> list[str]:
    return sorted(p.stem for p in MIGRATIONS_DIR.glob("v[0-9]*_*.py"))
