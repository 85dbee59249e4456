"""Ordered, paced dispatch of reply segments.

Segments are sent strictly in order, one at a time. After each segment
except the last, the sequencer waits a randomized delay: longer after
media than after text. The first failure aborts the rest of the sequence.
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Protocol

from .composer.models import Segment
from .config import PacingConfig
from .errors import DeliveryError

logger = logging.getLogger(__name__)


class DeliverySink(Protocol):
    """Send-only chat sink."""

    async def send_text(self, chat_id: str, text: str) -> int:
        """Send a text message; raise DeliveryError on failure."""
        ...

    async def send_media(self, chat_id: str, url: str) -> int:
        """Send a media reference; raise DeliveryError on failure."""
        ...


@dataclass
class Pacing:
    """Delay bands between segments, in seconds.

    ``sleep`` and ``rng`` are injectable so tests never wait on the clock.
    """

    text_delay: tuple[float, float] = (1.5, 2.5)
    media_delay: tuple[float, float] = (3.0, 4.0)
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    rng: random.Random = field(default_factory=random.Random)

    @classmethod
    def from_config(cls, config: PacingConfig, **kwargs) -> "Pacing":
        return cls(
            text_delay=(config.text_min, config.text_max),
            media_delay=(config.media_min, config.media_max),
            **kwargs,
        )

    def delay_after(self, segment: Segment) -> float:
        low, high = self.media_delay if segment.is_media else self.text_delay
        return self.rng.uniform(low, high)

    async def wait_after(self, segment: Segment) -> None:
        await self.sleep(self.delay_after(segment))


@dataclass
class DeliveryResult:
    """Outcome of one delivery sequence."""

    sent_count: int = 0
    message_ids: list[int] = field(default_factory=list)
    total: int = 0
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None and self.sent_count == self.total

    @property
    def partial(self) -> bool:
        return 0 < self.sent_count < self.total

    def to_dict(self) -> dict:
        return {
            "sent_count": self.sent_count,
            "total": self.total,
            "message_ids": list(self.message_ids),
            "success": self.success,
            "partial": self.partial,
            "error": self.error,
        }


class DeliverySequencer:
    """Dispatches segments through a sink with pacing."""

    def __init__(self, sink: DeliverySink, pacing: Pacing | None = None) -> None:
        self.sink = sink
        self.pacing = pacing or Pacing()

    async def deliver(self, segments: list[Segment], chat_id: str) -> DeliveryResult:
        """Send segments in order.

        Args:
            segments: Segments to send.
            chat_id: Target channel.

        Returns:
            DeliveryResult; on failure ``sent_count`` is the number of
            segments sent before the failing one.
        """
        result = DeliveryResult(total=len(segments))

        for index, segment in enumerate(segments):
            try:
                if segment.is_media:
                    message_id = await self.sink.send_media(chat_id, segment.content)
                else:
                    message_id = await self.sink.send_text(chat_id, segment.content)
            except DeliveryError as e:
                e.index = index
                logger.warning(
                    f"Delivery aborted at segment {index + 1}/{len(segments)}: {e}"
                )
                result.error = str(e)
                return result

            result.sent_count += 1
            result.message_ids.append(message_id)

            if index < len(segments) - 1:
                await self.pacing.wait_after(segment)

        return result
