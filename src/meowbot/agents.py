"""Reactive and proactive agent pipelines.

Both pipelines run one sequential pass per trigger:
read memory, gather input, assemble context, generate, commit memory,
deliver, and summarize. Memory is committed before delivery, so a partially
delivered reply still leaves memory reflecting the whole reply; the
delivery result in the summary makes that visible.
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Protocol

from .activity import DEFAULT_TOPICS, MemberActivity, StudyTopics, empty_activity, evaluate_goals
from .clock import local_now, local_today
from .composer import Composer, Composition, Segment
from .config import Member, match_member
from .context import (
    MemberReport,
    MoodContext,
    ProactiveContext,
    ProactiveContextAssembler,
    ReactiveContextAssembler,
    interleave_media,
    mood_for,
)
from .cursor import MessageSource, fetch_new_messages, fetch_window, recent_messages
from .delivery import DeliveryResult, DeliverySequencer
from .errors import PersistenceError
from .logging import get_logger
from .memory import MemoryPort, MemoryRecord, MemoryUpdate
from .streak import classify_streak, normalize_streak
from .telegram.models import InboundMessage

logger = logging.getLogger(__name__)

FORCED_SAMPLE_SIZE = 2
EXCERPT_SIZE = 5
EXCERPT_FETCH_LIMIT = 10


class ActivitySource(Protocol):
    def fetch(self, emails: list[str]) -> list[MemberActivity]: ...

    def fetch_topics(self, day_number: int) -> StudyTopics: ...


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RunSummary:
    """Structured result of one agent run, returned to the trigger caller."""

    run: str
    processed_message_count: int = 0
    generated_replies: list[str] = field(default_factory=list)
    memory_updated: bool = False
    diagnostics: dict[str, Any] = field(default_factory=dict)
    mood_context: dict[str, Any] = field(default_factory=dict)
    delivery: DeliveryResult | None = None
    used_fallback: bool = False
    last_message_id: int | None = None
    tier: str | None = None
    media_category: str | None = None
    members: list[dict[str, Any]] = field(default_factory=list)
    day_number: int | None = None
    topics: dict[str, str] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.delivery is None or self.delivery.success

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": self.success,
            "processed_message_count": self.processed_message_count,
            "generated_replies": list(self.generated_replies),
            "memory_updated": self.memory_updated,
            "diagnostics": self.diagnostics,
            "mood_context": self.mood_context,
            "delivery": self.delivery.to_dict() if self.delivery else None,
            "used_fallback": self.used_fallback,
            "last_message_id": self.last_message_id,
        }
        if self.run == "roast":
            data.update(
                tier=self.tier,
                media_category=self.media_category,
                members=self.members,
                day_number=self.day_number,
                topics=self.topics,
            )
        return data


def read_memory(store: MemoryPort, diagnostics: dict[str, Any]) -> MemoryRecord | None:
    """Read the memory record; a failed read is treated as a cold start."""
    try:
        return store.get()
    except PersistenceError as e:
        logger.warning(f"Memory read failed, treating as cold start: {e}")
        diagnostics["memory_read_error"] = str(e)
        return None


def commit_memory(
    store: MemoryPort, update: MemoryUpdate, run: str, diagnostics: dict[str, Any]
) -> bool:
    """Upsert the memory update. Write failures are logged, never raised."""
    try:
        store.upsert(update)
    except PersistenceError as e:
        logger.warning(f"Memory write failed: {e}")
        diagnostics["memory_write_error"] = str(e)
        get_logger().log("memory_write_failed", run=run, error=str(e))
        return False
    return True


class ReactiveAgent:
    """Replies to messages posted since the agent last spoke."""

    run_name = "reply"

    def __init__(
        self,
        source: MessageSource,
        memory: MemoryPort,
        composer: Composer,
        sequencer: DeliverySequencer,
        chat_id: str,
        agent_identity: str,
        members: list[Member] | None = None,
        assembler: ReactiveContextAssembler | None = None,
        page_size: int = 100,
        utc_offset_hours: float = 5.5,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.source = source
        self.memory = memory
        self.composer = composer
        self.sequencer = sequencer
        self.chat_id = str(chat_id)
        self.agent_identity = agent_identity
        self.members = members or []
        self.assembler = assembler or ReactiveContextAssembler(members=self.members)
        self.page_size = page_size
        self.utc_offset_hours = utc_offset_hours
        self.clock = clock

    def _is_member(self, message: InboundMessage) -> bool:
        if not self.members:
            return True
        return match_member(self.members, message.sender_name) is not None

    def mood(self) -> MoodContext:
        return mood_for(local_now(self.utc_offset_hours, self.clock()))

    async def run(self, force: bool = False) -> RunSummary:
        """Run one reactive pass.

        Args:
            force: When there are no new messages, reply to the last two
                eligible messages instead of stopping.

        Returns:
            RunSummary for the trigger response.

        Raises:
            GenerationError: The generation call failed at the transport level.
        """
        started = time.time()
        diagnostics: dict[str, Any] = {"forced": force}
        event_log = get_logger()

        record = read_memory(self.memory, diagnostics)
        stored_cursor = record.last_message_id if record else 0

        resolution, window = await fetch_new_messages(
            self.source,
            self.chat_id,
            self.agent_identity,
            stored_cursor=stored_cursor,
            page_size=self.page_size,
        )
        diagnostics.update(resolution.diagnostics)
        if "error" in resolution.diagnostics:
            event_log.log(
                "source_fetch_failed",
                chat_id=self.chat_id,
                run=self.run_name,
                error=resolution.diagnostics["error"],
            )

        messages = [m for m in resolution.messages if self._is_member(m)]
        diagnostics["ignored_non_members"] = len(resolution.messages) - len(messages)

        mood = self.mood()
        summary = RunSummary(
            run=self.run_name,
            diagnostics=diagnostics,
            mood_context=mood.to_dict(),
            last_message_id=stored_cursor or None,
        )

        if not messages and force:
            eligible = [
                m
                for m in recent_messages(window, self.chat_id, self.agent_identity, len(window))
                if self._is_member(m)
            ]
            messages = eligible[-FORCED_SAMPLE_SIZE:]
            diagnostics["forced_message_ids"] = [m.message_id for m in messages]

        if not messages:
            logger.info("No new messages to reply to")
            event_log.log_run(
                self.run_name,
                processed=0,
                sent_count=0,
                duration_ms=(time.time() - started) * 1000,
                chat_id=self.chat_id,
            )
            return summary

        request = self.assembler.assemble(messages, record, mood)
        composition = await self.composer.compose(request)
        reply = composition.reply

        new_cursor = max(stored_cursor, max(m.message_id for m in messages))
        summary.memory_updated = commit_memory(
            self.memory,
            reply.memory_update.with_cursor(new_cursor),
            self.run_name,
            diagnostics,
        )

        delivery = await self.sequencer.deliver(list(reply.segments), self.chat_id)
        _record_delivery(self.run_name, self.chat_id, delivery)

        summary.processed_message_count = len(messages)
        summary.generated_replies = reply.texts
        summary.delivery = delivery
        summary.used_fallback = composition.used_fallback
        summary.last_message_id = new_cursor
        if composition.error:
            diagnostics["generation_error"] = composition.error

        event_log.log_run(
            self.run_name,
            processed=len(messages),
            sent_count=delivery.sent_count,
            duration_ms=(time.time() - started) * 1000,
            fallback=composition.used_fallback,
            error=delivery.error,
            chat_id=self.chat_id,
        )
        return summary


class ProactiveAgent:
    """Periodic goal check-in that praises or roasts tracked members."""

    run_name = "roast"

    def __init__(
        self,
        activity: ActivitySource,
        memory: MemoryPort,
        composer: Composer,
        sequencer: DeliverySequencer,
        chat_id: str,
        agent_identity: str,
        members: list[Member],
        source: MessageSource | None = None,
        assembler: ProactiveContextAssembler | None = None,
        page_size: int = 100,
        utc_offset_hours: float = 5.5,
        clock: Callable[[], datetime] = _utc_now,
        rng: random.Random | None = None,
    ) -> None:
        self.activity = activity
        self.memory = memory
        self.composer = composer
        self.sequencer = sequencer
        self.chat_id = str(chat_id)
        self.agent_identity = agent_identity
        self.members = [m for m in members if m.email]
        self.source = source
        self.assembler = assembler or ProactiveContextAssembler()
        self.page_size = page_size
        self.utc_offset_hours = utc_offset_hours
        self.clock = clock
        self.rng = rng or random.Random()

    def _load_activity(self, diagnostics: dict[str, Any]) -> list[MemberActivity]:
        emails = [m.email for m in self.members if m.email]
        try:
            by_email = {a.email: a for a in self.activity.fetch(emails)}
        except PersistenceError as e:
            logger.warning(f"Activity read failed, using zero counters: {e}")
            diagnostics["activity_read_error"] = str(e)
            by_email = {}
        return [by_email.get(email) or empty_activity(email) for email in emails]

    def _load_topics(self, day_number: int, diagnostics: dict[str, Any]) -> StudyTopics:
        try:
            return self.activity.fetch_topics(day_number)
        except PersistenceError as e:
            logger.warning(f"Topic read failed, using default topics: {e}")
            diagnostics["topics_read_error"] = str(e)
            return DEFAULT_TOPICS

    async def _recent_lines(self, diagnostics: dict[str, Any]) -> list[str]:
        if self.source is None:
            return []
        # A negative offset asks for the newest updates instead of the oldest pending ones.
        window, error = await fetch_window(
            self.source, EXCERPT_FETCH_LIMIT, offset=-EXCERPT_FETCH_LIMIT
        )
        if error is not None:
            diagnostics["source_error"] = error
            get_logger().log(
                "source_fetch_failed", chat_id=self.chat_id, run=self.run_name, error=error
            )
            return []
        excerpt = recent_messages(window, self.chat_id, self.agent_identity, EXCERPT_SIZE)
        return [
            replace(m, date=local_now(self.utc_offset_hours, m.date) if m.date else None).format_line()
            for m in excerpt
        ]

    def _segments(
        self, composition: Composition, context: ProactiveContext, diagnostics: dict[str, Any]
    ) -> list[Segment]:
        texts = [s.content for s in composition.reply.segments if not s.is_media]
        if not texts:
            # The tier picks the media, so a media-only reply still needs words.
            diagnostics["no_text_segments"] = True
            texts = list(context.request.fallback_segments)
        interleaved = interleave_media(texts, context.media_category, self.rng)
        return [Segment.from_string(s) for s in interleaved]

    async def run(self) -> RunSummary:
        """Run one proactive check-in.

        Raises:
            GenerationError: The generation call failed at the transport level.
        """
        started = time.time()
        diagnostics: dict[str, Any] = {}
        event_log = get_logger()

        now = self.clock()
        today = local_today(self.utc_offset_hours, now)
        mood = mood_for(local_now(self.utc_offset_hours, now))

        record = read_memory(self.memory, diagnostics)
        activities = self._load_activity(diagnostics)

        reports = [
            MemberReport(
                name=member.name,
                snapshot=evaluate_goals(member.key, activity.counters),
                streak=classify_streak(normalize_streak(activity.raw_streak), today),
            )
            for member, activity in zip(self.members, activities)
        ]

        topics = self._load_topics(self.assembler.day_for(today), diagnostics)
        recent_lines = await self._recent_lines(diagnostics)
        context = self.assembler.assemble(reports, recent_lines, record, today, topics)
        diagnostics["today"] = today.isoformat()
        diagnostics["recent_lines"] = len(recent_lines)

        composition = await self.composer.compose(context.request)
        if composition.error:
            diagnostics["generation_error"] = composition.error

        segments = self._segments(composition, context, diagnostics)
        memory_updated = commit_memory(
            self.memory, composition.reply.memory_update, self.run_name, diagnostics
        )

        delivery = await self.sequencer.deliver(segments, self.chat_id)
        _record_delivery(self.run_name, self.chat_id, delivery)

        event_log.log_run(
            self.run_name,
            processed=len(reports),
            sent_count=delivery.sent_count,
            duration_ms=(time.time() - started) * 1000,
            fallback=composition.used_fallback,
            error=delivery.error,
            chat_id=self.chat_id,
        )

        return RunSummary(
            run=self.run_name,
            processed_message_count=0,
            generated_replies=[s.content for s in segments],
            memory_updated=memory_updated,
            diagnostics=diagnostics,
            mood_context=mood.to_dict(),
            delivery=delivery,
            used_fallback=composition.used_fallback,
            last_message_id=record.last_message_id if record else None,
            tier=context.tier.value,
            media_category=context.media_category,
            members=[r.to_dict() for r in reports],
            day_number=context.day_number,
            topics=topics.to_dict(),
        )


def _record_delivery(run: str, chat_id: str, delivery: DeliveryResult) -> None:
    if delivery.error is not None:
        get_logger().log_delivery_aborted(
            run,
            sent_count=delivery.sent_count,
            total=delivery.total,
            error=delivery.error,
            chat_id=chat_id,
        )
