"""Context assembly for replies to inbound chat messages."""

import random

from ..config import Member, match_member
from ..memory import MemoryRecord
from ..telegram.models import InboundMessage
from .mood import MoodContext
from .prompts import (
    LENGTH_RULES,
    OUTPUT_SHAPE,
    REACTIVE_PERSONA,
    RESPONSE_POOLS,
    SAMPLE_SIZES,
    SYSTEM_PROMPT,
)
from .request import GenerationRequest, Intensity

HEATED_MARKERS = ("!!", "??", "why", "hate", "angry", "help", "stupid")


def member_names(members: list[Member]) -> str:
    """Join member names for prompts: ``"Om and Durva"``."""
    names = [m.name for m in members]
    if not names:
        return "the humans in this chat"
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + " and " + names[-1]


def note_keys_block(members: list[Member]) -> str:
    """Render the ``notes`` object skeleton for the output shape."""
    if not members:
        return '"<name>": "what you know about them"'
    return ", ".join(f'"{m.key}": "about {m.name}"' for m in members)


def format_memory(memory: MemoryRecord | None, members: list[Member]) -> str:
    """Render the memory record as a compact prompt line."""
    if memory is None:
        return "No memory - first meeting"

    parts = [
        f"Memory: {memory.memory or 'None'}",
        f"Long-term: {memory.long_term_memory or 'None'}",
        f"Recent: {memory.short_term_memory or 'None'}",
    ]
    keys = [m.key for m in members] or sorted(memory.notes)
    for key in keys:
        parts.append(f"{key.title()}: {memory.notes.get(key) or 'None'}")
    return " | ".join(parts)


def last_message_context(memory: MemoryRecord | None) -> str:
    """Anti-repetition hint built from the last outbound reply."""
    if memory is None or not memory.last_message:
        return "No previous reply recorded"
    return (
        f'LAST REPLY: "{memory.last_message}" - AVOID repeating similar '
        "responses or topics"
    )


def input_intensity(messages: list[InboundMessage]) -> Intensity:
    """Estimate how heated the inbound messages are."""
    text = " ".join(m.text for m in messages)
    words = text.split()
    lowered = text.lower()

    heated = any(marker in lowered for marker in HEATED_MARKERS)
    shouting = sum(1 for w in words if len(w) > 2 and w.isupper()) >= 2

    if heated or shouting or len(words) > 25:
        return Intensity.HIGH
    if len(messages) > 1 or len(words) > 8:
        return Intensity.MEDIUM
    return Intensity.LOW


class ReactiveContextAssembler:
    """Builds the generation request for replying to new messages."""

    def __init__(
        self,
        members: list[Member] | None = None,
        rng: random.Random | None = None,
        temperature: float = 0.9,
        max_tokens: int = 600,
    ) -> None:
        self.members = members or []
        self.rng = rng or random.Random()
        self.temperature = temperature
        self.max_tokens = max_tokens

    def _speaker(self, message: InboundMessage) -> str:
        member = match_member(self.members, message.sender_name)
        if member is not None:
            return member.name
        return message.sender_name or "unknown"

    def _sample(self, pool: str) -> str:
        options = RESPONSE_POOLS[pool]
        size = min(SAMPLE_SIZES[pool], len(options))
        return ", ".join(self.rng.sample(options, size))

    def assemble(
        self,
        messages: list[InboundMessage],
        memory: MemoryRecord | None,
        mood: MoodContext,
    ) -> GenerationRequest:
        """Assemble the reply request.

        Args:
            messages: Unprocessed inbound messages, ascending by id.
            memory: Current memory record, or None on cold start.
            mood: Mood descriptor for the current moment.

        Returns:
            The GenerationRequest for the composer.
        """
        intensity = input_intensity(messages)
        input_block = "\n".join(f"{self._speaker(m)}: {m.text}" for m in messages)

        prompt = REACTIVE_PERSONA.format(
            member_names=member_names(self.members),
            last_message_context=last_message_context(memory),
            length_rules=LENGTH_RULES,
            intensity=intensity.value,
            insults=self._sample("insults"),
            praises=self._sample("praises"),
            concerns=self._sample("concerns"),
            reactions=self._sample("reactions"),
            study=self._sample("study"),
            mood=mood.describe(),
            memory=format_memory(memory, self.members),
            input=input_block,
            output_shape=OUTPUT_SHAPE.format(note_keys=note_keys_block(self.members)),
        )

        return GenerationRequest(
            system=SYSTEM_PROMPT,
            prompt=prompt,
            intensity=intensity,
            fallback_seed=input_block,
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
