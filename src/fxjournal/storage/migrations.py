from __future__ import annotations

from .db import Database


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value_json TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
"""


def apply_migrations(db: Database) -> None:
    with db.transaction() as conn:
        conn.executescript(SCHEMA_SQL)
