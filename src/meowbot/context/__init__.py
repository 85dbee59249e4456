"""Prompt context for the reactive and proactive pipelines."""

from .mood import MoodContext, mood_for, mood_for_time, time_of_day
from .proactive import (
    INTENSITY_FOR_TIER,
    MEDIA_FOR_TIER,
    MEDIA_POOLS,
    TIER_THRESHOLDS,
    MemberReport,
    ProactiveContext,
    ProactiveContextAssembler,
    Tier,
    fallback_lines,
    interleave_media,
    tier_for,
    tier_for_percent,
)
from .reactive import ReactiveContextAssembler, input_intensity
from .request import GenerationRequest, Intensity

__all__ = [
    "INTENSITY_FOR_TIER",
    "MEDIA_FOR_TIER",
    "MEDIA_POOLS",
    "TIER_THRESHOLDS",
    "GenerationRequest",
    "Intensity",
    "MemberReport",
    "MoodContext",
    "ProactiveContext",
    "ProactiveContextAssembler",
    "ReactiveContextAssembler",
    "Tier",
    "fallback_lines",
    "input_intensity",
    "interleave_media",
    "mood_for",
    "mood_for_time",
    "tier_for",
    "tier_for_percent",
    "time_of_day",
]
