"""Generation output decoding and the composer."""

from .decoder import decode_memory_update, decode_reply, extract_json_object
from .fallback import FALLBACK_PHRASES, fallback_reply, pick_phrase
from .generator import Composer
from .models import (
    Composition,
    GeneratedReply,
    Segment,
    SegmentKind,
    is_media_reference,
)

__all__ = [
    "FALLBACK_PHRASES",
    "Composer",
    "Composition",
    "GeneratedReply",
    "Segment",
    "SegmentKind",
    "decode_memory_update",
    "decode_reply",
    "extract_json_object",
    "fallback_reply",
    "is_media_reference",
    "pick_phrase",
]
