from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from threading import Lock
from typing import Any, Optional

from .models import AFFIRMATION_KEY, AffirmationRecord

logger = logging.getLogger(__name__)

LOCAL_NAMESPACE = "local"


class ClientState:
    """SQLite-backed client-local storage; holds the age affirmation record."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = Lock()
        self._conn = sqlite3.connect(self.path, check_same_thread=False)
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS state (
                namespace TEXT NOT NULL,
                key TEXT NOT NULL,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                PRIMARY KEY(namespace, key)
            )
            """
        )
        self._conn.commit()

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def get_affirmation(self) -> Optional[AffirmationRecord]:
        raw = self._get(LOCAL_NAMESPACE, AFFIRMATION_KEY)
        if raw is None:
            return None
        record = AffirmationRecord.from_record(raw)
        if record is None:
            logger.warning("Discarding malformed affirmation record: %r", raw)
            self.clear_affirmation()
        return record

    def set_affirmation(self, record: AffirmationRecord) -> None:
        self._set(LOCAL_NAMESPACE, AFFIRMATION_KEY, record.to_record())

    def clear_affirmation(self) -> None:
        self._delete(LOCAL_NAMESPACE, AFFIRMATION_KEY)

    def _get(self, namespace: str, key: str) -> Optional[Any]:
        with self._lock:
            cursor = self._conn.execute(
                "SELECT value FROM state WHERE namespace = ? AND key = ?", (namespace, key)
            )
            row = cursor.fetchone()
        if not row:
            return None
        try:
            return json.loads(row[0])
        except json.JSONDecodeError:
            return row[0]

    def _set(self, namespace: str, key: str, value: Any) -> None:
        payload = json.dumps(value)
        with self._lock:
            self._conn.execute(
                """
                INSERT INTO state(namespace, key, value, updated_at)
                VALUES(?, ?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(namespace, key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
                """,
                (namespace, key, payload),
            )
            self._conn.commit()

    def _delete(self, namespace: str, key: str) -> None:
        with self._lock:
            self._conn.execute(
                "DELETE FROM state WHERE namespace = ? AND key = ?", (namespace, key)
            )
            self._conn.commit()
