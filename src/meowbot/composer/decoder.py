"""Lenient decoder for generation output.

Models wrap JSON in markdown fences or surround it with chatter. The
decoder strips fences, then takes the text from the first ``{`` to the
last ``}`` and validates the shape.
"""

import json
import re
from typing import Any

from ..errors import ReplyDecodeError
from ..memory import MemoryUpdate
from .models import GeneratedReply, Segment

FENCE_PATTERN = re.compile(r"```(?:json)?", re.IGNORECASE)
LEGACY_NOTE_SUFFIX = "_data"


def extract_json_object(text: str) -> str:
    """Return the outermost ``{...}`` span of a fenced or chatty reply.

    Raises:
        ReplyDecodeError: No object delimiters are present.
    """
    cleaned = FENCE_PATTERN.sub("", text).strip()
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end <= start:
        raise ReplyDecodeError("No JSON object in generation output")
    return cleaned[start : end + 1]


def _optional_str(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def _notes(data: dict[str, Any]) -> dict[str, str]:
    notes: dict[str, str] = {}
    for key, value in data.items():
        if key.endswith(LEGACY_NOTE_SUFFIX) and isinstance(value, str):
            notes[key[: -len(LEGACY_NOTE_SUFFIX)].lower()] = value

    explicit = data.get("notes")
    if isinstance(explicit, dict):
        for key, value in explicit.items():
            if isinstance(value, str):
                notes[str(key).lower()] = value
    return notes


def _commit_flag(data: dict[str, Any]) -> bool:
    for key in ("should_commit_long_term", "should_update_long_term"):
        value = data.get(key)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() == "true"
    return False


def decode_memory_update(data: Any, first_text: str) -> MemoryUpdate:
    """Build a MemoryUpdate from the ``memory_update`` object.

    Raises:
        ReplyDecodeError: The value is not an object.
    """
    if not isinstance(data, dict):
        raise ReplyDecodeError("memory_update must be an object")

    last_message = _optional_str(data, "last_message")
    return MemoryUpdate(
        memory=_optional_str(data, "memory"),
        long_term_memory=_optional_str(data, "long_term_memory"),
        short_term_memory=_optional_str(data, "short_term_memory"),
        notes=_notes(data),
        last_message=last_message if last_message else first_text,
        should_commit_long_term=_commit_flag(data),
    )


def decode_reply(text: str) -> GeneratedReply:
    """Decode raw generation output into a reply.

    Args:
        text: Raw completion text.

    Returns:
        The decoded reply with at least one segment.

    Raises:
        ReplyDecodeError: The output is not usable.
    """
    if not text or not text.strip():
        raise ReplyDecodeError("Empty generation output")

    try:
        payload = json.loads(extract_json_object(text))
    except json.JSONDecodeError as e:
        raise ReplyDecodeError(f"Invalid JSON in generation output: {e}") from e

    if not isinstance(payload, dict):
        raise ReplyDecodeError("Generation output is not an object")

    raw_messages = payload.get("messages")
    if not isinstance(raw_messages, list):
        raise ReplyDecodeError("messages must be a list")

    texts = [m.strip() for m in raw_messages if isinstance(m, str) and m.strip()]
    if not texts:
        raise ReplyDecodeError("messages is empty")

    if "memory_update" not in payload:
        raise ReplyDecodeError("memory_update is missing")

    first_text = next((t for t in texts if not Segment.from_string(t).is_media), texts[0])
    return GeneratedReply(
        segments=tuple(Segment.from_string(t) for t in texts),
        memory_update=decode_memory_update(payload["memory_update"], first_text),
    )
