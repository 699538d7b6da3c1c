from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

from .db import Database


def _json_dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)


class KeyValueStore:
    """JSON values under string keys, one row per key."""

    def __init__(self, db: Database) -> None:
        self.db = db

    def set_json(self, key: str, value: Any) -> None:
        with self.db.transaction() as conn:
            conn.execute(
                """
                INSERT INTO kv_store (key, value_json, updated_at)
                VALUES (?, ?, ?)
                ON CONFLICT(key) DO UPDATE SET
                    value_json = excluded.value_json,
                    updated_at = excluded.updated_at
                """,
                (key, _json_dumps(value), datetime.now(tz=UTC).isoformat()),
            )

    def get_json(self, key: str) -> Any | None:
        with self.db.read_only() as conn:
            row = conn.execute("SELECT value_json FROM kv_store WHERE key = ?", (key,)).fetchone()
            if not row:
                return None
            return json.loads(row["value_json"])

    def delete(self, key: str) -> bool:
        with self.db.transaction() as conn:
            cur = conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
            return cur.rowcount > 0
