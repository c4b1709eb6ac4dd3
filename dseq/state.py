"""Persistent application state backed by a small key-value store."""

from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import dataclass, field
from pathlib import Path

STATE_KEY = b"stateKey"
_DB_NAME = "state.db"
_UINT64_MASK = 0xFFFF_FFFF_FFFF_FFFF

_log = logging.getLogger(__name__)


@dataclass
class State:
    """Number of processed transactions and the last finalized height."""

    size: int = 0
    height: int = 0
    _db: sqlite3.Connection | None = field(
        default=None, init=False, repr=False, compare=False
    )

    @classmethod
    def open(cls, path):
        """Open (or create) the state store in directory ``path`` and load it."""
        directory = Path(path)
        directory.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(directory / _DB_NAME)
        try:
            conn.execute(
                "CREATE TABLE IF NOT EXISTS kv (key BLOB PRIMARY KEY, value BLOB NOT NULL)"
            )
            conn.commit()
            row = conn.execute(
                "SELECT value FROM kv WHERE key = ?", (STATE_KEY,)
            ).fetchone()
            state = cls()
            if row and row[0]:
                data = json.loads(row[0])
                if not isinstance(data, dict):
                    raise ValueError("stored state is not a JSON object")
                state.size = int(data.get("size", 0))
                state.height = int(data.get("height", 0))
        except Exception:
            conn.close()
            raise
        state._db = conn
        return state

    def to_json(self):
        """Serialise the state the way it is stored."""
        return json.dumps(
            {"size": self.size, "height": self.height}, separators=(",", ":")
        )

    def save(self):
        """Write the current state to the store."""
        if self._db is None:
            raise RuntimeError("state store is not open")
        with self._db:
            self._db.execute(
                "INSERT OR REPLACE INTO kv (key, value) VALUES (?, ?)",
                (STATE_KEY, self.to_json().encode()),
            )

    def hash(self):
        """Application hash: the size as an 8-byte big-endian unsigned integer."""
        return (self.size & _UINT64_MASK).to_bytes(8, "big")

    def close(self):
        """Close the store; errors are logged, not raised."""
        if self._db is None:
            return
        try:
            self._db.close()
        except sqlite3.Error as exc:
            _log.warning("Closing state database: %s", exc)
        finally:
            self._db = None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()