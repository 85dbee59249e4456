"""Shared fakes for the pipeline tests."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from meowbot.errors import DeliveryError, PersistenceError, SourceFetchError
from meowbot.logging import configure_logger, reset_logger
from meowbot.memory import MemoryRecord, MemoryUpdate, apply_update
from meowbot.telegram.models import InboundMessage

CHAT_ID = "-1001"
BOT_NAME = "Meow"


class InMemoryMemoryStore:
    """MemoryPort fake holding the record in memory."""

    def __init__(self, record: MemoryRecord | None = None) -> None:
        self.record = record
        self.fail_reads = False
        self.fail_writes = False
        self.writes: list[MemoryUpdate] = []

    def get(self) -> MemoryRecord | None:
        if self.fail_reads:
            raise PersistenceError("read failed")
        return self.record

    def upsert(self, update: MemoryUpdate) -> MemoryRecord:
        if self.fail_writes:
            raise PersistenceError("write failed")
        self.writes.append(update)
        self.record = apply_update(self.record, update)
        return self.record


class FakeSource:
    """Message source returning a fixed window."""

    def __init__(self, messages: list[InboundMessage] | None = None) -> None:
        self.messages = list(messages or [])
        self.error: str | None = None
        self.calls: list[int] = []
        self.offsets: list[int | None] = []

    async def fetch_recent(self, limit: int, offset: int | None = None) -> list[InboundMessage]:
        self.calls.append(limit)
        self.offsets.append(offset)
        if self.error:
            raise SourceFetchError(self.error)
        return self.messages[-limit:]


class RecordingSink:
    """Delivery sink that records dispatches and can fail on a given call."""

    def __init__(self, fail_at: int | None = None) -> None:
        self.fail_at = fail_at
        self.sent: list[tuple[str, str, str]] = []
        self._calls = 0
        self._next_id = 500

    def _dispatch(self, kind: str, chat_id: str, content: str) -> int:
        call = self._calls
        self._calls += 1
        if self.fail_at is not None and call == self.fail_at:
            raise DeliveryError(f"{kind} rejected")
        self.sent.append((kind, chat_id, content))
        self._next_id += 1
        return self._next_id

    async def send_text(self, chat_id: str, text: str) -> int:
        return self._dispatch("text", chat_id, text)

    async def send_media(self, chat_id: str, url: str) -> int:
        return self._dispatch("media", chat_id, url)


class ScriptedLLM:
    """LLM fake that returns queued responses and records its calls."""

    def __init__(self, *responses: str) -> None:
        self.responses = list(responses)
        self.calls: list[dict] = []

    async def complete(self, prompt, system=None, temperature=None, max_tokens=None) -> str:
        self.calls.append(
            {
                "prompt": prompt,
                "system": system,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        )
        return self.responses.pop(0)


class RecordingSleep:
    """Async sleep replacement that returns immediately."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def make_message(
    message_id: int,
    sender: str = "Om",
    text: str = "hello",
    chat_id: str = CHAT_ID,
    username: str | None = None,
) -> InboundMessage:
    return InboundMessage(
        message_id=message_id,
        chat_id=chat_id,
        text=text,
        sender_name=sender,
        sender_username=username,
        date=datetime(2025, 1, 10, 8, 30, tzinfo=timezone.utc),
    )


@pytest.fixture(autouse=True)
def event_log(tmp_path: Path):
    """Route the JSONL event log into the test's temp directory."""
    log = configure_logger(tmp_path / "logs")
    yield log
    reset_logger()


@pytest.fixture
def memory_store() -> InMemoryMemoryStore:
    return InMemoryMemoryStore()


@pytest.fixture
def source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def no_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def message_factory():
    return make_message


@pytest.fixture
def scripted_llm():
    return ScriptedLLM


@pytest.fixture
def sink_factory():
    return RecordingSink
