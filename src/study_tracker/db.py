"""Database initialization, connection management and key-value records."""
import json
import os
import sqlite3
from datetime import datetime
from pathlib import Path

DEFAULT_DB_PATH = os.environ.get(
    "STUDY_TRACKER_DB", str(Path.home() / ".study_tracker" / "tracker.db")
)

SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    partition TEXT NOT NULL,
    key TEXT NOT NULL,
    value TEXT NOT NULL,
    updated_at TEXT,
    PRIMARY KEY (partition, key)
);

CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    email TEXT NOT NULL UNIQUE,
    name TEXT NOT NULL,
    password_hash TEXT NOT NULL,
    salt TEXT NOT NULL,
    created_at TEXT
);

CREATE TABLE IF NOT EXISTS user_settings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    key TEXT NOT NULL UNIQUE,
    value TEXT
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory and foreign keys enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()


def read_record(db_path: str, partition: str, key: str):
    """Return the decoded JSON record stored under (partition, key), or None."""
    conn = get_connection(db_path)
    try:
        row = conn.execute(
            "SELECT value FROM kv_store WHERE partition = ? AND key = ?", (partition, key)
        ).fetchone()
    finally:
        conn.close()
    return json.loads(row["value"]) if row else None


def write_records(db_path: str, partition: str, records: dict) -> None:
    """Store several JSON records for one partition in a single transaction."""
    now = datetime.now().isoformat()
    conn = get_connection(db_path)
    try:
        with conn:
            for key, value in records.items():
                conn.execute(
                    """INSERT INTO kv_store (partition, key, value, updated_at) VALUES (?, ?, ?, ?)
                    ON CONFLICT(partition, key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at""",
                    (partition, key, json.dumps(value), now),
                )
    finally:
        conn.close()


def get_setting(db_path: str, key: str, default: str = None) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
        (key, value, value),
    )
    conn.commit()
    conn.close()


def delete_setting(db_path: str, key: str) -> None:
    conn = get_connection(db_path)
    conn.execute("DELETE FROM user_settings WHERE key = ?", (key,))
    conn.commit()
    conn.close()
