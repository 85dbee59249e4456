"""Memory module for the persisted conversational record."""

from .models import SINGLETON_ID, MemoryRecord, MemoryUpdate, apply_update
from .store import MemoryPort, SQLiteMemoryStore

__all__ = [
    "SINGLETON_ID",
    "MemoryPort",
    "MemoryRecord",
    "MemoryUpdate",
    "SQLiteMemoryStore",
    "apply_update",
]
