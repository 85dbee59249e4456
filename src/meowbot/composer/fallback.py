"""Deterministic replies for unusable generation output."""

import zlib

from ..memory import MemoryUpdate
from .models import GeneratedReply, Segment

FALLBACK_PHRASES = (
    "what now?",
    "ugh",
    "seriously?",
    "leave me alone",
    "I'm trying to nap here",
    "figure it out yourself",
    "go find some brain cells",
    "no fish for you today",
)
BROKEN_SUFFIX = ", and now my brain is broken too"
FALLBACK_MEMORY = "Error occurred during conversation"
FALLBACK_SHORT_TERM = "Had an error, typical human chaos"


def pick_phrase(seed: str) -> str:
    """Choose a phrase from the pool by CRC32 of the seed."""
    index = zlib.crc32(seed.encode("utf-8")) % len(FALLBACK_PHRASES)
    return FALLBACK_PHRASES[index]


def fallback_reply(seed: str, segments: tuple[str, ...] = ()) -> GeneratedReply:
    """Build the fallback reply.

    The same seed always yields the same reply. Long-term memory and notes
    are left untouched.

    Args:
        seed: Text the phrase choice is keyed on.
        segments: Caller-supplied replies; when empty a phrase is drawn
            from FALLBACK_PHRASES.
    """
    texts = list(segments) or [pick_phrase(seed) + BROKEN_SUFFIX]
    return GeneratedReply(
        segments=tuple(Segment.from_string(t) for t in texts),
        memory_update=MemoryUpdate(
            memory=FALLBACK_MEMORY,
            short_term_memory=FALLBACK_SHORT_TERM,
            last_message=texts[0],
        ),
    )
