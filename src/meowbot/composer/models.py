"""Reply segments and composition results."""

from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlparse

from ..memory import MemoryUpdate

MEDIA_HOSTS = ("giphy.com", "tenor.com")
MEDIA_SUFFIXES = (".gif", ".mp4")


class SegmentKind(Enum):
    TEXT = "text"
    MEDIA = "media"


def is_media_reference(value: str) -> bool:
    """Check whether a string is an https link to an animation."""
    candidate = value.strip()
    if " " in candidate:
        return False
    parsed = urlparse(candidate)
    if parsed.scheme != "https" or not parsed.netloc:
        return False
    host = parsed.netloc.lower()
    if any(host == h or host.endswith("." + h) for h in MEDIA_HOSTS):
        return True
    return parsed.path.lower().endswith(MEDIA_SUFFIXES)


@dataclass(frozen=True)
class Segment:
    """One outbound unit: a text message or a media reference."""

    kind: SegmentKind
    content: str

    @classmethod
    def from_string(cls, value: str) -> "Segment":
        """Classify a raw reply string."""
        if is_media_reference(value):
            return cls(SegmentKind.MEDIA, value.strip())
        return cls(SegmentKind.TEXT, value)

    @property
    def is_media(self) -> bool:
        return self.kind is SegmentKind.MEDIA


@dataclass(frozen=True)
class GeneratedReply:
    """Decoded generation output.

    Attributes:
        segments: Ordered reply segments, never empty.
        memory_update: Proposed change to the memory record.
    """

    segments: tuple[Segment, ...]
    memory_update: MemoryUpdate

    @property
    def texts(self) -> list[str]:
        return [s.content for s in self.segments]


@dataclass
class Composition:
    """Outcome of one composer call."""

    reply: GeneratedReply
    used_fallback: bool = False
    raw: str = ""
    error: str | None = None
