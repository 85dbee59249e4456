"""Resolution of which inbound messages are still unprocessed.

The chat source has no acknowledgment: every poll returns a fixed-size
window of recent messages, many of them already answered. The cutoff is the
agent's own most recent message in the window; when the agent has not
posted within the window, the stored cursor is used instead.

Known limitation: a message that scrolls out of the window before the
agent posts again is never seen.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from .errors import SourceFetchError
from .telegram.models import InboundMessage

logger = logging.getLogger(__name__)


class MessageSource(Protocol):
    """Poll-style source of recent chat messages."""

    async def fetch_recent(
        self, limit: int, offset: int | None = None
    ) -> list[InboundMessage]:
        """Return up to ``limit`` recent messages; raise SourceFetchError on failure.

        A negative ``offset`` selects the newest updates rather than the oldest.
        """
        ...


@dataclass
class CursorResolution:
    """Outcome of resolving unprocessed messages."""

    messages: list[InboundMessage] = field(default_factory=list)
    has_new: bool = False
    cutoff: int = 0
    cutoff_source: str = "stored"
    diagnostics: dict[str, Any] = field(default_factory=dict)


def _channel_messages(
    window: list[InboundMessage], chat_id: str
) -> list[InboundMessage]:
    """Messages of one channel with text, ascending by id."""
    selected = [m for m in window if m.chat_id == str(chat_id) and m.text.strip()]
    return sorted(selected, key=lambda m: m.message_id)


def resolve_new_messages(
    window: list[InboundMessage],
    chat_id: str,
    agent_identity: str,
    stored_cursor: int = 0,
) -> CursorResolution:
    """Determine which messages in a window still need a reply.

    Args:
        window: Recent messages from the source, in any order.
        chat_id: The channel to consider.
        agent_identity: The agent's own first name or username.
        stored_cursor: The last processed message id from memory.

    Returns:
        A CursorResolution with non-agent messages newer than the cutoff,
        ascending by id.
    """
    channel = _channel_messages(window, chat_id)

    cutoff = stored_cursor
    cutoff_source = "stored"
    for message in reversed(channel):
        if message.is_from(agent_identity):
            cutoff = message.message_id
            cutoff_source = "self"
            break

    new_messages = [
        m
        for m in channel
        if m.message_id > cutoff and not m.is_from(agent_identity)
    ]

    return CursorResolution(
        messages=new_messages,
        has_new=bool(new_messages),
        cutoff=cutoff,
        cutoff_source=cutoff_source,
        diagnostics={
            "window_size": len(window),
            "channel_messages": len(channel),
            "stored_cursor": stored_cursor,
            "cutoff": cutoff,
            "cutoff_source": cutoff_source,
            "new_message_ids": [m.message_id for m in new_messages],
            "target_chat_id": str(chat_id),
        },
    )


def recent_messages(
    window: list[InboundMessage],
    chat_id: str,
    agent_identity: str,
    limit: int,
) -> list[InboundMessage]:
    """Return the newest non-agent messages of a channel, ascending by id."""
    if limit <= 0:
        return []
    channel = [
        m for m in _channel_messages(window, chat_id) if not m.is_from(agent_identity)
    ]
    return channel[-limit:]


async def fetch_window(
    source: MessageSource, page_size: int, offset: int | None = None
) -> tuple[list[InboundMessage], str | None]:
    """Fetch the source window, degrading failures to an empty window.

    Returns:
        The window and an error description, or None when the fetch worked.
    """
    try:
        return await source.fetch_recent(page_size, offset=offset), None
    except SourceFetchError as e:
        logger.warning(f"Message source fetch failed: {e}")
        return [], str(e)


async def fetch_new_messages(
    source: MessageSource,
    chat_id: str,
    agent_identity: str,
    stored_cursor: int = 0,
    page_size: int = 100,
) -> tuple[CursorResolution, list[InboundMessage]]:
    """Fetch the source window and resolve unprocessed messages.

    Never raises for source failures: they yield an empty resolution whose
    diagnostics carry the error.

    Returns:
        The resolution and the raw window it was computed from.
    """
    window, error = await fetch_window(source, page_size)
    if error is not None:
        return (
            CursorResolution(
                cutoff=stored_cursor,
                diagnostics={"error": error, "stored_cursor": stored_cursor},
            ),
            [],
        )
    return resolve_new_messages(window, chat_id, agent_identity, stored_cursor), window
