"""Tests for performance tiers and media interleaving."""

import random

import pytest

from meowbot.activity import GOAL_CATALOG, evaluate_goals
from meowbot.context import (
    INTENSITY_FOR_TIER,
    MEDIA_FOR_TIER,
    MEDIA_POOLS,
    TIER_THRESHOLDS,
    Intensity,
    Tier,
    interleave_media,
    tier_for,
    tier_for_percent,
)


def snapshot(completed: int):
    counters = {goal.counter: goal.target for goal in GOAL_CATALOG[:completed]}
    return evaluate_goals("x", counters)


class TestThresholds:
    def test_monotonic_and_exhaustive(self):
        bounds = [bound for bound, _ in TIER_THRESHOLDS]
        assert bounds == sorted(bounds, reverse=True)
        assert bounds[-1] == 0.0

    @pytest.mark.parametrize(
        "percent, tier",
        [(100, Tier.DECENT), (75, Tier.DECENT), (74.9, Tier.AVERAGE),
         (50, Tier.AVERAGE), (25, Tier.BAD), (24.9, Tier.TERRIBLE),
         (0, Tier.TERRIBLE), (-5, Tier.TERRIBLE)],
    )
    def test_bucket_edges(self, percent, tier):
        assert tier_for_percent(percent) is tier


class TestTierFor:
    def test_perfect(self):
        """10/10 for everyone is perfect."""
        assert tier_for([snapshot(10), snapshot(10)]) is Tier.PERFECT

    def test_half_is_average(self):
        """5/10 is average."""
        assert tier_for([snapshot(5)]) is Tier.AVERAGE

    def test_one_perfect(self):
        assert tier_for([snapshot(10), snapshot(2)]) is Tier.ONE_PERFECT

    def test_mean_across_members(self):
        assert tier_for([snapshot(9), snapshot(7)]) is Tier.DECENT
        assert tier_for([snapshot(1), snapshot(2)]) is Tier.TERRIBLE

    def test_no_members(self):
        assert tier_for([]) is Tier.TERRIBLE


class TestTierMaps:
    def test_every_tier_has_media_and_intensity(self):
        for tier in Tier:
            assert MEDIA_FOR_TIER[tier] in MEDIA_POOLS
            assert isinstance(INTENSITY_FOR_TIER[tier], Intensity)

    def test_escalation(self):
        assert MEDIA_FOR_TIER[Tier.PERFECT] == "proud"
        assert MEDIA_FOR_TIER[Tier.TERRIBLE] == "furious"
        assert INTENSITY_FOR_TIER[Tier.TERRIBLE] is Intensity.HIGH


class TestInterleaveMedia:
    def test_media_after_middle_and_at_end(self):
        result = interleave_media(["a", "b", "c", "d"], "angry", random.Random(1))
        assert len(result) == 6
        assert result[0] == "a" and result[1] == "b"
        assert result[2] in MEDIA_POOLS["angry"]
        assert result[3:5] == ["c", "d"]
        assert result[5] in MEDIA_POOLS["angry"]

    def test_single_text(self):
        result = interleave_media(["only"], "proud", random.Random(1))
        assert result[0] == "only"
        assert result[1] in MEDIA_POOLS["proud"]
        assert len(result) == 2

    def test_empty(self):
        assert interleave_media([], "proud", random.Random(1)) == []
