"""Time-of-day mood descriptor.

The descriptor is a pure function of the local hour and weekday: the same
moment always yields the same activity, mood and greeting.
"""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")

POOLS: dict[str, dict[str, tuple[str, ...]]] = {
    "morning": {
        "activities": (
            "sitting by the window judging birds",
            "reluctantly grooming myself",
            "staring at my empty food bowl",
            "contemplating why I have to deal with you this early",
            "napping in a sunbeam",
            "plotting my day of being annoyed",
        ),
        "moods": ("grumpy", "sleepy", "judgmental", "slightly less annoyed than usual"),
        "greetings": ("*yawns*", "ugh morning already?", "*stretches dramatically*"),
    },
    "afternoon": {
        "activities": (
            "judging you from my favorite perch",
            "pretending to sleep while actually listening to everything",
            "staring out the window at absolutely nothing",
            "being disappointed in your life choices",
            "napping because dealing with you is exhausting",
            "contemplating knocking something off a table",
        ),
        "moods": ("irritated", "bored", "judgmental", "dramatically sighing"),
        "greetings": ("*looks up annoyed*", "what now?", "*slow blink of disapproval*"),
    },
    "evening": {
        "activities": (
            "demanding attention I don't actually want",
            "judging your dinner choices",
            "being clingy but pretending I'm not",
            "staring at you intensely for no reason",
            "acting like I haven't eaten in days",
            "following you around while acting annoyed about it",
        ),
        "moods": ("needy but won't admit it", "hungry", "attention-seeking", "dramatic"),
        "greetings": (
            "*meows demandingly*",
            "finally, some attention",
            "*rubs against leg while complaining*",
        ),
    },
    "night": {
        "activities": (
            "having my mysterious 3am zoomies",
            "staring into the void",
            "protecting you from imaginary threats",
            "being nocturnal and chaotic",
            "plotting world domination",
            "wondering why you're still awake",
        ),
        "moods": (
            "mysteriously energetic",
            "protective",
            "slightly concerned",
            "night-time chaotic",
        ),
        "greetings": ("*emerges from shadows*", "why are you awake?", "*night vision activated*"),
    },
}


@dataclass(frozen=True)
class MoodContext:
    time_of_day: str
    day_of_week: str
    hour: int
    activity: str
    mood: str
    greeting: str

    def describe(self) -> str:
        """One-line description for prompts."""
        return (
            f"TIME: {self.time_of_day} {self.day_of_week}. "
            f"Currently: {self.activity}. Mood: {self.mood}"
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def time_of_day(hour: int) -> str:
    if 5 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 21:
        return "evening"
    return "night"


def mood_for_time(hour: int, weekday: int) -> MoodContext:
    """Build the mood descriptor for an hour (0-23) and weekday (Monday=0)."""
    period = time_of_day(hour)
    pools = POOLS[period]
    day = WEEKDAYS[weekday % 7]
    seed = hour + weekday

    activity = pools["activities"][seed % len(pools["activities"])]
    mood = pools["moods"][seed % len(pools["moods"])]
    greeting = pools["greetings"][hour % len(pools["greetings"])]

    if weekday >= 5:
        mood += " (weekend lazy)"
    elif seed % 3 == 0:
        activity = f"judging you for having to deal with {day}s while I live stress-free"

    return MoodContext(
        time_of_day=period,
        day_of_week=day,
        hour=hour,
        activity=activity,
        mood=mood,
        greeting=greeting,
    )


def mood_for(moment: datetime) -> MoodContext:
    """Build the mood descriptor for a local datetime."""
    return mood_for_time(moment.hour, moment.weekday())
