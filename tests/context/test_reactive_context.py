"""Tests for reply context assembly."""

import random

from meowbot.config import Member
from meowbot.context import Intensity, ReactiveContextAssembler, input_intensity, mood_for_time
from meowbot.context.reactive import format_memory, last_message_context, member_names
from meowbot.memory import MemoryRecord

MEMBERS = [Member("Om"), Member("Durva")]


class TestInputIntensity:
    def test_short_greeting_is_low(self, message_factory):
        assert input_intensity([message_factory(1, text="hi")]) is Intensity.LOW

    def test_several_messages_are_medium(self, message_factory):
        messages = [message_factory(1, text="hi"), message_factory(2, text="cat")]
        assert input_intensity(messages) is Intensity.MEDIUM

    def test_heated_is_high(self, message_factory):
        assert input_intensity([message_factory(1, text="I hate exams!!")]) is Intensity.HIGH

    def test_shouting_is_high(self, message_factory):
        message = message_factory(1, text="WHERE IS MY FOOD")
        assert input_intensity([message]) is Intensity.HIGH


class TestPromptHelpers:
    def test_member_names(self):
        assert member_names(MEMBERS) == "Om and Durva"
        assert member_names([Member("Om")]) == "Om"

    def test_format_memory_cold_start(self):
        assert "first meeting" in format_memory(None, MEMBERS)

    def test_format_memory_includes_notes(self):
        record = MemoryRecord(memory="m", notes={"om": "loves java"})
        text = format_memory(record, MEMBERS)
        assert "Om: loves java" in text
        assert "Durva: None" in text

    def test_last_message_context(self):
        assert "AVOID" in last_message_context(MemoryRecord(last_message="ugh"))
        assert "No previous reply" in last_message_context(None)


class TestReactiveContextAssembler:
    def test_assembles_request(self, message_factory):
        assembler = ReactiveContextAssembler(members=MEMBERS, rng=random.Random(3))
        messages = [message_factory(1, "om", "hello cat")]
        request = assembler.assemble(messages, None, mood_for_time(9, 2))

        assert "Om: hello cat" in request.prompt
        assert "Om and Durva" in request.prompt
        assert '"om": "about Om"' in request.prompt
        assert request.temperature == 0.9
        assert request.max_tokens == 600
        assert request.fallback_seed == "Om: hello cat"
        assert request.fallback_segments == ()

    def test_includes_last_reply_and_mood(self, message_factory):
        assembler = ReactiveContextAssembler(members=MEMBERS, rng=random.Random(3))
        record = MemoryRecord(last_message="go catch some fish")
        mood = mood_for_time(22, 4)
        request = assembler.assemble([message_factory(1)], record, mood)
        assert "go catch some fish" in request.prompt
        assert mood.describe() in request.prompt

    def test_same_seed_same_prompt(self, message_factory):
        messages = [message_factory(1)]
        mood = mood_for_time(9, 2)
        first = ReactiveContextAssembler(MEMBERS, rng=random.Random(5)).assemble(messages, None, mood)
        second = ReactiveContextAssembler(MEMBERS, rng=random.Random(5)).assemble(messages, None, mood)
        assert first.prompt == second.prompt
