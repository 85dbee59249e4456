"""Tests for SQLiteMemoryStore."""

import sqlite3
from pathlib import Path

import pytest

from meowbot.errors import PersistenceError
from meowbot.memory import MemoryUpdate, SQLiteMemoryStore


@pytest.fixture
def store(tmp_path: Path) -> SQLiteMemoryStore:
    """Create a store with a temporary database."""
    store = SQLiteMemoryStore(tmp_path / "meow.db")
    store.init_db()
    yield store
    store.close()


class TestMemoryStoreInit:
    """Tests for store initialization."""

    def test_creates_db_directory(self, tmp_path: Path):
        """Store creates parent directories if they don't exist."""
        nested = tmp_path / "nested" / "dir" / "meow.db"
        store = SQLiteMemoryStore(nested)
        store.init_db()
        assert nested.exists()
        store.close()

    def test_creates_memory_table(self, store: SQLiteMemoryStore):
        """init_db creates the meow_memory table."""
        conn = store._get_connection()
        cursor = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='meow_memory'"
        )
        assert cursor.fetchone() is not None

    def test_init_db_idempotent(self, store: SQLiteMemoryStore):
        """init_db can be called multiple times."""
        store.init_db()
        store.init_db()


class TestMemoryStoreGet:
    """Tests for reading the record."""

    def test_cold_start_returns_none(self, store: SQLiteMemoryStore):
        """An empty table reads as absent."""
        assert store.get() is None

    def test_missing_table_raises_persistence_error(self, tmp_path: Path):
        """Reading before init_db surfaces as PersistenceError."""
        store = SQLiteMemoryStore(tmp_path / "uninitialized.db")
        with pytest.raises(PersistenceError):
            store.get()
        store.close()


class TestMemoryStoreUpsert:
    """Tests for writing the record."""

    def test_upsert_creates_singleton(self, store: SQLiteMemoryStore):
        """First upsert creates exactly one row."""
        store.upsert(MemoryUpdate(memory="hi", notes={"om": "loud"}))
        record = store.get()
        assert record is not None
        assert record.memory == "hi"
        assert record.notes == {"om": "loud"}
        assert record.version == 1

    def test_repeated_upserts_keep_one_row(self, store: SQLiteMemoryStore):
        """Every write targets the same row."""
        store.upsert(MemoryUpdate(memory="one"))
        store.upsert(MemoryUpdate(memory="two"))
        store.upsert(MemoryUpdate(memory="three"))
        count = store._get_connection().execute(
            "SELECT COUNT(*) FROM meow_memory"
        ).fetchone()[0]
        assert count == 1
        assert store.get().version == 3
        assert store.get().memory == "three"

    def test_second_row_rejected(self, store: SQLiteMemoryStore):
        """The id check constraint forbids a second record."""
        store.upsert(MemoryUpdate(memory="one"))
        conn = store._get_connection()
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute(
                "INSERT INTO meow_memory (id, created_at, updated_at) VALUES (2, 'x', 'x')"
            )

    def test_long_term_preserved_without_commit(self, store: SQLiteMemoryStore):
        """A proposed long-term value is dropped when not committed."""
        store.upsert(MemoryUpdate(long_term_memory="origin", should_commit_long_term=True))
        store.upsert(MemoryUpdate(long_term_memory="overwrite attempt"))
        assert store.get().long_term_memory == "origin"

    def test_cursor_persisted(self, store: SQLiteMemoryStore):
        """The source cursor survives a reopen."""
        store.upsert(MemoryUpdate(last_message="meh").with_cursor(99))
        store.close()
        reopened = SQLiteMemoryStore(store.db_path)
        record = reopened.get()
        assert record.last_message_id == 99
        assert record.last_message == "meh"
        reopened.close()

    def test_notes_merge_across_writes(self, store: SQLiteMemoryStore):
        """Notes accumulate per key."""
        store.upsert(MemoryUpdate(notes={"om": "a"}))
        store.upsert(MemoryUpdate(notes={"durva": "b"}))
        assert store.get().notes == {"om": "a", "durva": "b"}
