"""Telegram integration: inbound messages and the send sink."""

from .bot import TelegramGateway, escape_markdown, message_from_update, truncate_message
from .models import InboundMessage

__all__ = [
    "InboundMessage",
    "TelegramGateway",
    "escape_markdown",
    "message_from_update",
    "truncate_message",
]
