from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .settings import settings

# Seconds a writer waits on a locked database before giving up.
BUSY_TIMEOUT_S = 5.0


def utc_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def db_file() -> Path:
    """Event DB location; a directory path (e.g. a bind mount) gets swarmsvc.db inside it."""
    path = Path(settings.db_path).resolve()
    if path.is_dir():
        path = path / "swarmsvc.db"
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def connect() -> sqlite3.Connection:
    conn = sqlite3.connect(db_file(), timeout=BUSY_TIMEOUT_S, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def init_db() -> None:
    """Create the events table if it does not exist."""
    with connect() as conn:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS events (
              id INTEGER PRIMARY KEY AUTOINCREMENT,
              ts TEXT NOT NULL,
              level TEXT NOT NULL,
              service_name TEXT,
              service_id TEXT,
              message TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_events_ts ON events(ts);
            CREATE INDEX IF NOT EXISTS idx_events_service_id ON events(service_id);
            """
        )


def log_event(
    level: str,
    message: str,
    service_name: str | None = None,
    service_id: str | None = None,
) -> None:
    """Record an event row.

    Never raises on database errors: a failed write must not change the
    outcome of the request that produced the event.
    """
    if not settings.enable_events:
        return
    try:
        with connect() as conn:
            conn.execute(
                "INSERT INTO events (ts, level, service_name, service_id, message) VALUES (?, ?, ?, ?, ?)",
                (utc_now(), level.upper(), service_name, service_id, message),
            )
    except sqlite3.Error:
        return


def latest_events(limit: int = 100) -> list[dict[str, Any]]:
    with connect() as conn:
        rows = conn.execute("SELECT * FROM events ORDER BY id DESC LIMIT ?", (limit,)).fetchall()
        return [dict(r) for r in rows]
