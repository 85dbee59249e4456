"""Telegram message source and delivery sink."""

import logging
import re

from telegram import Bot, Update
from telegram.constants import ParseMode
from telegram.error import TelegramError

from ..errors import DeliveryError, SourceFetchError
from .models import InboundMessage

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 4096


def escape_markdown(text: str) -> str:
    """Escape special characters for Telegram MarkdownV2."""
    # Characters that need escaping in MarkdownV2
    special_chars = r"_*[]()~`>#+-=|{}.!"
    pattern = f"([{re.escape(special_chars)}])"
    return re.sub(pattern, r"\\\1", text)


def truncate_message(text: str, max_length: int = MAX_MESSAGE_LENGTH) -> str:
    """Truncate message to fit Telegram limits."""
    if len(text) <= max_length:
        return text
    return text[: max_length - 20] + "\n... [truncated]"


def message_from_update(update: Update) -> InboundMessage | None:
    """Convert a Telegram update into an InboundMessage.

    Returns None for updates that carry no chat message.
    """
    message = update.message
    if message is None:
        return None

    sender = message.from_user
    return InboundMessage(
        message_id=message.message_id,
        chat_id=str(message.chat.id),
        text=message.text or "",
        sender_name=sender.first_name if sender else "",
        sender_username=sender.username if sender else None,
        sender_id=sender.id if sender else None,
        date=message.date,
    )


class TelegramGateway:
    """Poll-style message source and send-only sink over the Bot API.

    ``getUpdates`` is called without an offset by the reply path, so nothing
    is acknowledged and repeated polls return already-seen messages. A
    negative offset makes Telegram drop the updates before the returned ones.
    """

    def __init__(
        self,
        token: str | None = None,
        bot: Bot | None = None,
        escape: bool = True,
    ) -> None:
        if bot is None:
            if not token:
                raise ValueError("TELEGRAM_TOKEN not set")
            bot = Bot(token)
        self.bot = bot
        self.escape = escape
        self._ready = False

    async def _ensure_ready(self) -> None:
        if not self._ready:
            await self.bot.initialize()
            self._ready = True

    async def fetch_recent(
        self, limit: int, offset: int | None = None
    ) -> list[InboundMessage]:
        """Fetch up to ``limit`` recent messages.

        Without an offset, getUpdates returns the oldest pending updates;
        ``offset=-limit`` returns the newest ``limit`` instead.

        Raises:
            SourceFetchError: If the Bot API call fails.
        """
        kwargs: dict[str, int] = {"limit": limit}
        if offset is not None:
            kwargs["offset"] = offset
        try:
            await self._ensure_ready()
            updates = await self.bot.get_updates(**kwargs)
        except TelegramError as e:
            raise SourceFetchError(f"Telegram getUpdates failed: {e}") from e

        messages = []
        for update in updates:
            message = message_from_update(update)
            if message is not None:
                messages.append(message)
        return messages

    async def send_text(self, chat_id: str, text: str) -> int:
        """Send a text message and return its id.

        Raises:
            DeliveryError: If the Bot API rejects the message.
        """
        body = truncate_message(text)
        try:
            await self._ensure_ready()
            if self.escape:
                sent = await self.bot.send_message(
                    chat_id=chat_id,
                    text=escape_markdown(body),
                    parse_mode=ParseMode.MARKDOWN_V2,
                )
            else:
                sent = await self.bot.send_message(chat_id=chat_id, text=body)
        except TelegramError as e:
            raise DeliveryError(f"sendMessage failed: {e}") from e
        return sent.message_id

    async def send_media(self, chat_id: str, url: str) -> int:
        """Send an animation by URL and return its message id.

        Raises:
            DeliveryError: If the Bot API rejects the animation.
        """
        try:
            await self._ensure_ready()
            sent = await self.bot.send_animation(chat_id=chat_id, animation=url)
        except TelegramError as e:
            raise DeliveryError(f"sendAnimation failed: {e}") from e
        return sent.message_id

    async def close(self) -> None:
        """Release the underlying HTTP client."""
        if self._ready:
            await self.bot.shutdown()
            self._ready = False
