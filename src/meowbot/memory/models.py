"""Data models for the conversational memory record."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

SINGLETON_ID = 1


@dataclass(frozen=True)
class MemoryRecord:
    """The single persisted record of cross-invocation state.

    Attributes:
        memory: Short summary of the conversation so far.
        long_term_memory: Important events; only replaced on explicit commit.
        short_term_memory: Recent context.
        notes: Free-text notes keyed by member entity key.
        last_message: Text of the most recent outbound reply.
        last_message_id: Source cursor, the highest processed message id.
        version: Incremented on every write.
        created_at: ISO timestamp when first written.
        updated_at: ISO timestamp of the latest write.
    """

    memory: str = ""
    long_term_memory: str = ""
    short_term_memory: str = ""
    notes: dict[str, str] = field(default_factory=dict)
    last_message: str = ""
    last_message_id: int = 0
    version: int = 0
    created_at: str | None = None
    updated_at: str | None = None


@dataclass(frozen=True)
class MemoryUpdate:
    """A proposed change to the memory record.

    Fields left as None keep the stored value. ``notes`` are merged per key.
    ``long_term_memory`` is only written when ``should_commit_long_term``
    is set.
    """

    memory: str | None = None
    long_term_memory: str | None = None
    short_term_memory: str | None = None
    notes: dict[str, str] = field(default_factory=dict)
    last_message: str | None = None
    last_message_id: int | None = None
    should_commit_long_term: bool = False

    def with_cursor(self, last_message_id: int | None) -> "MemoryUpdate":
        """Return a copy that also advances the source cursor."""
        return replace(self, last_message_id=last_message_id)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def apply_update(
    current: MemoryRecord | None,
    update: MemoryUpdate,
    now: str | None = None,
) -> MemoryRecord:
    """Merge an update into the current record.

    Args:
        current: The stored record, or None on cold start.
        update: The proposed update.
        now: Timestamp to stamp the write with; defaults to the current time.

    Returns:
        The record as it should be persisted.
    """
    base = current or MemoryRecord()
    stamp = now or _now_iso()

    long_term = base.long_term_memory
    if update.should_commit_long_term and update.long_term_memory is not None:
        long_term = update.long_term_memory

    notes = dict(base.notes)
    notes.update({k: v for k, v in update.notes.items() if v})

    return MemoryRecord(
        memory=base.memory if update.memory is None else update.memory,
        long_term_memory=long_term,
        short_term_memory=(
            base.short_term_memory
            if update.short_term_memory is None
            else update.short_term_memory
        ),
        notes=notes,
        last_message=(
            base.last_message if update.last_message is None else update.last_message
        ),
        last_message_id=(
            base.last_message_id
            if update.last_message_id is None
            else update.last_message_id
        ),
        version=base.version + 1,
        created_at=base.created_at or stamp,
        updated_at=stamp,
    )
