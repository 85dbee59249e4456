"""The generation request shared by both context assemblers."""

from dataclasses import dataclass, field
from enum import Enum


class Intensity(Enum):
    """How hard the reply should go: one short line up to an escalating rant."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class GenerationRequest:
    """Everything the composer needs for one generation call.

    Attributes:
        system: Persona and output-format instructions.
        prompt: The assembled context.
        intensity: Expected reply intensity.
        fallback_seed: Text the deterministic fallback is keyed on.
        fallback_segments: Replies to use when generation output is
            unusable; empty means the composer's own phrase pool.
        temperature: Sampling temperature for the call.
        max_tokens: Output token budget for the call.
    """

    system: str
    prompt: str
    intensity: Intensity = Intensity.LOW
    fallback_seed: str = ""
    fallback_segments: tuple[str, ...] = field(default_factory=tuple)
    temperature: float = 0.9
    max_tokens: int = 600
