"""SQLite storage for the singleton memory record."""

import json
import sqlite3
from pathlib import Path
from typing import Protocol

from ..errors import PersistenceError
from .models import SINGLETON_ID, MemoryRecord, MemoryUpdate, apply_update


class MemoryPort(Protocol):
    """Persistence port for the memory record."""

    def get(self) -> MemoryRecord | None:
        """Return the record, or None if it has never been written."""
        ...

    def upsert(self, update: MemoryUpdate) -> MemoryRecord:
        """Merge an update into the record, creating it if needed."""
        ...


class SQLiteMemoryStore:
    """Persistent storage for the memory record using SQLite.

    The table holds at most one row, pinned to a fixed id. Every write is
    an upsert against that id; there is no locking, so the last writer wins.
    """

    def __init__(self, db_path: Path) -> None:
        """Initialize the store with a database path.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def init_db(self) -> None:
        """Create the memory table if it doesn't exist."""
        conn = self._get_connection()
        conn.execute(f"""
            CREATE TABLE IF NOT EXISTS meow_memory (
                id                  INTEGER PRIMARY KEY CHECK (id = {SINGLETON_ID}),
                memory              TEXT NOT NULL DEFAULT '',
                long_term_memory    TEXT NOT NULL DEFAULT '',
                short_term_memory   TEXT NOT NULL DEFAULT '',
                notes               TEXT NOT NULL DEFAULT '{{}}',
                last_message        TEXT NOT NULL DEFAULT '',
                last_message_id     INTEGER NOT NULL DEFAULT 0,
                version             INTEGER NOT NULL DEFAULT 0,
                created_at          TEXT NOT NULL,
                updated_at          TEXT NOT NULL
            )
        """)
        conn.commit()

    def get(self) -> MemoryRecord | None:
        """Get the memory record.

        Returns:
            The stored record, or None on cold start.

        Raises:
            PersistenceError: If the database cannot be read.
        """
        try:
            conn = self._get_connection()
            cursor = conn.execute(
                "SELECT * FROM meow_memory WHERE id = ?", (SINGLETON_ID,)
            )
            row = cursor.fetchone()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to read memory: {e}") from e

        if row is None:
            return None
        return self._row_to_record(row)

    def upsert(self, update: MemoryUpdate) -> MemoryRecord:
        """Merge an update into the stored record.

        Args:
            update: The update to apply.

        Returns:
            The record as written.

        Raises:
            PersistenceError: If the database cannot be read or written.
        """
        record = apply_update(self.get(), update)
        try:
            conn = self._get_connection()
            conn.execute(
                """
                INSERT INTO meow_memory (
                    id, memory, long_term_memory, short_term_memory, notes,
                    last_message, last_message_id, version, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    memory = excluded.memory,
                    long_term_memory = excluded.long_term_memory,
                    short_term_memory = excluded.short_term_memory,
                    notes = excluded.notes,
                    last_message = excluded.last_message,
                    last_message_id = excluded.last_message_id,
                    version = excluded.version,
                    updated_at = excluded.updated_at
                """,
                (
                    SINGLETON_ID,
                    record.memory,
                    record.long_term_memory,
                    record.short_term_memory,
                    json.dumps(record.notes, ensure_ascii=False),
                    record.last_message,
                    record.last_message_id,
                    record.version,
                    record.created_at,
                    record.updated_at,
                ),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to write memory: {e}") from e
        return record

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _row_to_record(self, row: sqlite3.Row) -> MemoryRecord:
        """Convert a database row to a MemoryRecord."""
        try:
            notes = json.loads(row["notes"] or "{}")
        except json.JSONDecodeError:
            notes = {}
        if not isinstance(notes, dict):
            notes = {}
        return MemoryRecord(
            memory=row["memory"],
            long_term_memory=row["long_term_memory"],
            short_term_memory=row["short_term_memory"],
            notes={str(k): str(v) for k, v in notes.items()},
            last_message=row["last_message"],
            last_message_id=row["last_message_id"],
            version=row["version"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
