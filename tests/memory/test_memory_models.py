"""Tests for memory record merging."""

from meowbot.memory import MemoryRecord, MemoryUpdate, apply_update


def stored() -> MemoryRecord:
    return MemoryRecord(
        memory="summary",
        long_term_memory="they met in 2024",
        short_term_memory="talked about exams",
        notes={"om": "likes java", "durva": "studies SQL"},
        last_message="ugh",
        last_message_id=40,
        version=3,
        created_at="2025-01-01T00:00:00+00:00",
        updated_at="2025-01-02T00:00:00+00:00",
    )


class TestApplyUpdateColdStart:
    """Tests for merging into an absent record."""

    def test_creates_record_with_version_one(self):
        """A cold-start write produces version 1."""
        record = apply_update(None, MemoryUpdate(memory="first"), now="2025-01-10T00:00:00")
        assert record.memory == "first"
        assert record.version == 1
        assert record.created_at == "2025-01-10T00:00:00"
        assert record.updated_at == "2025-01-10T00:00:00"

    def test_defaults_when_nothing_proposed(self):
        """Unset fields fall back to empty values."""
        record = apply_update(None, MemoryUpdate())
        assert record.long_term_memory == ""
        assert record.notes == {}
        assert record.last_message_id == 0


class TestApplyUpdateMerge:
    """Tests for merging into an existing record."""

    def test_none_fields_keep_stored_values(self):
        """Fields left as None are preserved."""
        record = apply_update(stored(), MemoryUpdate(short_term_memory="new"))
        assert record.memory == "summary"
        assert record.short_term_memory == "new"
        assert record.last_message == "ugh"

    def test_version_increments(self):
        """Every write bumps the version."""
        record = apply_update(stored(), MemoryUpdate())
        assert record.version == 4

    def test_created_at_preserved(self):
        """created_at survives later writes."""
        record = apply_update(stored(), MemoryUpdate(), now="2025-02-01T00:00:00")
        assert record.created_at == "2025-01-01T00:00:00+00:00"
        assert record.updated_at == "2025-02-01T00:00:00"

    def test_notes_merge_per_key(self):
        """Notes are merged; empty proposals do not erase."""
        update = MemoryUpdate(notes={"om": "skipped coding", "durva": ""})
        record = apply_update(stored(), update)
        assert record.notes == {"om": "skipped coding", "durva": "studies SQL"}

    def test_cursor_advances_via_with_cursor(self):
        """with_cursor sets the last processed id."""
        record = apply_update(stored(), MemoryUpdate().with_cursor(57))
        assert record.last_message_id == 57


class TestConditionalLongTerm:
    """Tests for the long-term commit flag."""

    def test_long_term_untouched_without_flag(self):
        """A proposed long-term value is ignored unless committed."""
        update = MemoryUpdate(long_term_memory="rewritten history")
        record = apply_update(stored(), update)
        assert record.long_term_memory == "they met in 2024"

    def test_long_term_replaced_with_flag(self):
        """A committed long-term value replaces the stored one."""
        update = MemoryUpdate(
            long_term_memory="Om got an offer", should_commit_long_term=True
        )
        record = apply_update(stored(), update)
        assert record.long_term_memory == "Om got an offer"

    def test_flag_without_value_keeps_stored(self):
        """Committing with no value keeps the stored long-term memory."""
        record = apply_update(stored(), MemoryUpdate(should_commit_long_term=True))
        assert record.long_term_memory == "they met in 2024"
