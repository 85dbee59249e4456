"""Context assembly for the periodic goal check-in.

The performance tier is computed here, before generation, and it alone
picks the media category and the fallback lines. A degraded generation
step therefore cannot soften or sharpen the escalation.
"""

import random
from dataclasses import dataclass
from datetime import date
from enum import Enum

from ..activity import DEFAULT_TOPICS, GoalSnapshot, StudyTopics
from ..clock import day_number as programme_day
from ..memory import MemoryRecord
from ..streak import StreakReport
from .prompts import OUTPUT_SHAPE, PROACTIVE_PERSONA, SYSTEM_PROMPT
from .mood import WEEKDAYS
from .reactive import format_memory, last_message_context
from .request import GenerationRequest, Intensity


class Tier(Enum):
    """Aggregate performance bucket."""

    PERFECT = "perfect"
    ONE_PERFECT = "one_perfect"
    DECENT = "decent"
    AVERAGE = "average"
    BAD = "bad"
    TERRIBLE = "terrible"


# Descending lower bounds on the mean completion percent; the last bound is 0.
TIER_THRESHOLDS: tuple[tuple[float, Tier], ...] = (
    (75.0, Tier.DECENT),
    (50.0, Tier.AVERAGE),
    (25.0, Tier.BAD),
    (0.0, Tier.TERRIBLE),
)

MEDIA_FOR_TIER: dict[Tier, str] = {
    Tier.PERFECT: "proud",
    Tier.ONE_PERFECT: "satisfied",
    Tier.DECENT: "satisfied",
    Tier.AVERAGE: "disappointed",
    Tier.BAD: "angry",
    Tier.TERRIBLE: "furious",
}

INTENSITY_FOR_TIER: dict[Tier, Intensity] = {
    Tier.PERFECT: Intensity.LOW,
    Tier.ONE_PERFECT: Intensity.MEDIUM,
    Tier.DECENT: Intensity.MEDIUM,
    Tier.AVERAGE: Intensity.HIGH,
    Tier.BAD: Intensity.HIGH,
    Tier.TERRIBLE: Intensity.HIGH,
}

MEDIA_POOLS: dict[str, tuple[str, ...]] = {
    "proud": (
        "https://media.giphy.com/media/ToCRja2miF3Xi/giphy.gif",
    ),
    "satisfied": (
        "https://media.giphy.com/media/1rzHSymOFmy0Do1Mb0/giphy.gif",
        "https://media.giphy.com/media/NfzERYyiWcXU4/giphy.gif",
        "https://media.giphy.com/media/1DTBGm5Rfgymk/giphy.gif",
    ),
    "disappointed": (
        "https://media.giphy.com/media/rho9L4MsYXaec/giphy.gif",
        "https://media.giphy.com/media/3OhXBaoR1tVPW/giphy.gif",
        "https://media.giphy.com/media/CM1rHbKDMH2BW/giphy.gif",
    ),
    "angry": (
        "https://media.giphy.com/media/vySkPlXaNO0ElMIkeo/giphy.gif",
        "https://media.giphy.com/media/ul0rmVRjQHD9ELz8ZJ/giphy.gif",
        "https://media.giphy.com/media/bcqAMUTUHoLDy/giphy.gif",
    ),
    "furious": (
        "https://media.giphy.com/media/lkuRLPYa6PDj2SPIwJ/giphy.gif",
        "https://media.giphy.com/media/B0voyStDsmiStwcBoh/giphy.gif",
        "https://media.giphy.com/media/YmVNzDnboB0RQEpmLr/giphy.gif",
    ),
}

TIER_LINES: dict[Tier, tuple[str, ...]] = {
    Tier.PERFECT: (
        "Purr-fect work today! You've made mama cat proud 🐱",
        "This is exactly what I expect from my well-trained kittens",
    ),
    Tier.ONE_PERFECT: (
        "{perfect} completed everything perfectly - well done!",
        "{others}, you need to follow this example tomorrow",
    ),
    Tier.DECENT: (
        "Good effort, but I expect consistency from my kittens",
        "Not bad, just don't let it go to your whiskers",
    ),
    Tier.AVERAGE: (
        "I expected better from you - time to step up",
        "This performance needs improvement - mama expects more",
    ),
    Tier.BAD: (
        "Such lazy furballs today! Where's your motivation?",
        "This won't do - mama cat is not pleased",
    ),
    Tier.TERRIBLE: (
        "Absolutely unacceptable! What kind of kittens are you?",
        "No treats until you show me proper effort!",
    ),
}


@dataclass(frozen=True)
class MemberReport:
    """One tracked member's goals and streak for the day."""

    name: str
    snapshot: GoalSnapshot
    streak: StreakReport

    def describe(self) -> str:
        missed = ", ".join(g.describe() for g in self.snapshot.missed_goals)
        return (
            f"{self.name.upper()}'S PERFORMANCE: {self.snapshot.completed_count}/"
            f"{self.snapshot.total} goals ({round(self.snapshot.percent)}%)\n"
            f"FAILED AT: {missed or 'Nothing - completed everything!'}\n"
            f"STREAK: {self.streak.describe()}"
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "completed_goals": self.snapshot.completed_count,
            "total_goals": self.snapshot.total,
            "completion_percent": round(self.snapshot.percent, 1),
            "is_perfect": self.snapshot.is_perfect,
            "missed_goals": [
                {"name": g.name, "attempted": g.attempted, "target": g.target, "shortfall": g.shortfall}
                for g in self.snapshot.missed_goals
            ],
            "streak": {
                "last_update_date": self.streak.state.last_update_date,
                "count": self.streak.display_count,
                "status": self.streak.status.value,
                "days_behind": self.streak.days_behind,
            },
        }


@dataclass(frozen=True)
class ProactiveContext:
    request: GenerationRequest
    tier: Tier
    media_category: str
    day_number: int


def tier_for_percent(percent: float) -> Tier:
    """Map a mean completion percent to a non-perfect tier."""
    clamped = min(100.0, max(0.0, percent))
    for bound, tier in TIER_THRESHOLDS:
        if clamped >= bound:
            return tier
    return Tier.TERRIBLE


def tier_for(snapshots: list[GoalSnapshot]) -> Tier:
    """Compute the aggregate tier across tracked members.

    All members perfect is PERFECT, some perfect is ONE_PERFECT; otherwise
    the mean completion percent is bucketed by TIER_THRESHOLDS.
    """
    if snapshots and all(s.is_perfect for s in snapshots):
        return Tier.PERFECT
    if any(s.is_perfect for s in snapshots):
        return Tier.ONE_PERFECT
    if not snapshots:
        return Tier.TERRIBLE
    mean = sum(s.percent for s in snapshots) / len(snapshots)
    return tier_for_percent(mean)


def fallback_lines(tier: Tier, reports: list[MemberReport]) -> tuple[str, ...]:
    """Deterministic lines for a tier, used when generation output is unusable."""
    perfect = [r.name for r in reports if r.snapshot.is_perfect]
    others = [r.name for r in reports if not r.snapshot.is_perfect]
    return tuple(
        line.format(
            perfect=" and ".join(perfect) or "Someone",
            others=" and ".join(others) or "Everyone else",
        )
        for line in TIER_LINES[tier]
    )


def pick_media(category: str, rng: random.Random) -> str:
    return rng.choice(MEDIA_POOLS[category])


def interleave_media(texts: list[str], category: str, rng: random.Random) -> list[str]:
    """Place a media reference after the middle text segment and at the end."""
    if not texts:
        return []
    result: list[str] = []
    middle = len(texts) // 2 - 1
    for i, text in enumerate(texts):
        result.append(text)
        if i == middle:
            result.append(pick_media(category, rng))
    result.append(pick_media(category, rng))
    return result


class ProactiveContextAssembler:
    """Builds the generation request for the goal check-in."""

    def __init__(
        self,
        start_date: date = date(2025, 8, 16),
        temperature: float = 0.8,
        max_tokens: int = 800,
    ) -> None:
        self.start_date = start_date
        self.temperature = temperature
        self.max_tokens = max_tokens

    def day_for(self, today: date) -> int:
        return programme_day(self.start_date, today)

    def assemble(
        self,
        reports: list[MemberReport],
        recent_lines: list[str],
        memory: MemoryRecord | None,
        today: date,
        topics: StudyTopics | None = None,
    ) -> ProactiveContext:
        """Assemble the check-in request.

        Args:
            reports: One report per tracked member.
            recent_lines: Excerpt of recent chat, read-only context.
            memory: Current memory record, or None on cold start.
            today: Local calendar date of the check-in.
            topics: The day's study topics; the defaults when omitted.

        Returns:
            The request together with the tier and media category.
        """
        tier = tier_for([r.snapshot for r in reports])
        day_number = self.day_for(today)
        day_of_week = WEEKDAYS[today.weekday()]
        intensity = INTENSITY_FOR_TIER[tier]
        names = [r.name for r in reports]

        recent_context = ""
        if recent_lines:
            recent_context = "Recent chat context:\n" + "\n".join(recent_lines) + "\n\n"

        note_keys = ", ".join(f'"{n.lower()}": "about {n}"' for n in names)
        prompt = PROACTIVE_PERSONA.format(
            member_names=" and ".join(names) or "your kittens",
            day_of_week=day_of_week,
            day_number=day_number,
            study_topics=(topics or DEFAULT_TOPICS).describe(),
            recent_context=recent_context,
            performance="\n\n".join(r.describe() for r in reports),
            tier=tier.value,
            intensity=intensity.value,
            memory=format_memory(memory, []),
            last_message_context=last_message_context(memory),
            output_shape=OUTPUT_SHAPE.format(note_keys=note_keys),
        )

        request = GenerationRequest(
            system=SYSTEM_PROMPT,
            prompt=prompt,
            intensity=intensity,
            fallback_seed=f"{day_number}:{tier.value}",
            fallback_segments=fallback_lines(tier, reports),
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )
        return ProactiveContext(
            request=request,
            tier=tier,
            media_category=MEDIA_FOR_TIER[tier],
            day_number=day_number,
        )
