"""Database initialization and progress record storage."""
import sqlite3
from datetime import datetime
from pathlib import Path

from devsecops_tutor.config import APP_HOME

DEFAULT_DB_PATH = str(APP_HOME / "tutor.db")

SCHEMA = """
CREATE TABLE IF NOT EXISTS progress_records (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()


def read_record(db_path: str, key: str) -> str | None:
    """Raw serialized value stored under `key`, or None if never written."""
    conn = get_connection(db_path)
    try:
        row = conn.execute("SELECT value FROM progress_records WHERE key = ?", (key,)).fetchone()
    finally:
        conn.close()
    return row["value"] if row else None


def write_record(db_path: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    try:
        conn.execute(
            """INSERT INTO progress_records (key, value, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at""",
            (key, value, datetime.now().isoformat()),
        )
        conn.commit()
    finally:
        conn.close()
