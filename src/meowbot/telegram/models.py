"""Inbound chat message model."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class InboundMessage:
    """A message read from the chat source. Never persisted."""

    message_id: int
    chat_id: str
    text: str
    sender_name: str = ""
    sender_username: str | None = None
    sender_id: int | None = None
    date: datetime | None = None

    def is_from(self, identity: str) -> bool:
        """Check whether the sender matches an identity (first name or username)."""
        wanted = identity.strip().lstrip("@").lower()
        if not wanted:
            return False
        if self.sender_name.strip().lower() == wanted:
            return True
        return bool(self.sender_username) and self.sender_username.lower() == wanted

    def format_line(self) -> str:
        """Format as ``[HH:MM] Name: text`` for prompt excerpts."""
        stamp = self.date.strftime("%H:%M") if self.date else "--:--"
        return f"[{stamp}] {self.sender_name or 'Unknown'}: {self.text}"
