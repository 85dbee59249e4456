"""Wiring of live collaborators from settings."""

import logging
from dataclasses import asdict
from typing import Any

from groq import AsyncGroq

from .activity import SQLiteActivityRepository
from .agents import ProactiveAgent, ReactiveAgent
from .composer import Composer
from .config import Settings
from .context import ProactiveContextAssembler, ReactiveContextAssembler
from .cursor import fetch_new_messages
from .delivery import DeliverySequencer, Pacing
from .llm import GroqLLMClient
from .memory import SQLiteMemoryStore
from .telegram import TelegramGateway

logger = logging.getLogger(__name__)


class Runtime:
    """Owns the gateway, stores and agents for one process."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

        if not settings.generation.api_key:
            raise ValueError("GROQ_API_KEY not set")

        self.gateway = TelegramGateway(token=settings.telegram.token)
        self.memory = SQLiteMemoryStore(settings.db_path)
        self.memory.init_db()
        self.activity = SQLiteActivityRepository(settings.db_path)

        llm = GroqLLMClient(
            AsyncGroq(api_key=settings.generation.api_key),
            model=settings.generation.model,
        )
        composer = Composer(llm)
        sequencer = DeliverySequencer(self.gateway, Pacing.from_config(settings.pacing))

        self.reactive = ReactiveAgent(
            source=self.gateway,
            memory=self.memory,
            composer=composer,
            sequencer=sequencer,
            chat_id=settings.telegram.chat_id,
            agent_identity=settings.telegram.bot_username,
            members=settings.members,
            assembler=ReactiveContextAssembler(
                members=settings.members,
                temperature=settings.generation.reply_temperature,
                max_tokens=settings.generation.reply_max_tokens,
            ),
            page_size=settings.telegram.page_size,
            utc_offset_hours=settings.utc_offset_hours,
        )
        self.proactive = ProactiveAgent(
            activity=self.activity,
            memory=self.memory,
            composer=composer,
            sequencer=sequencer,
            chat_id=settings.telegram.chat_id,
            agent_identity=settings.telegram.bot_username,
            members=settings.members,
            source=self.gateway,
            assembler=ProactiveContextAssembler(
                start_date=settings.start_date,
                temperature=settings.generation.roast_temperature,
                max_tokens=settings.generation.roast_max_tokens,
            ),
            page_size=settings.telegram.page_size,
            utc_offset_hours=settings.utc_offset_hours,
        )

    async def state(self) -> dict[str, Any]:
        """Read-only view of the source window and the memory record."""
        record = self.memory.get()
        resolution, window = await fetch_new_messages(
            self.gateway,
            self.settings.telegram.chat_id,
            self.settings.telegram.bot_username,
            stored_cursor=record.last_message_id if record else 0,
            page_size=self.settings.telegram.page_size,
        )
        return {
            "memory": asdict(record) if record else None,
            "window": [
                {
                    "message_id": m.message_id,
                    "chat_id": m.chat_id,
                    "sender_name": m.sender_name,
                    "text": m.text,
                    "date": m.date.isoformat() if m.date else None,
                }
                for m in window
            ],
            "pending_message_ids": [m.message_id for m in resolution.messages],
            "diagnostics": resolution.diagnostics,
        }

    async def close(self) -> None:
        await self.gateway.close()
        self.memory.close()
        self.activity.close()
