"""Tests for goal check-in context assembly."""

from datetime import date

from meowbot.activity import DEFAULT_TOPICS, GOAL_CATALOG, StudyTopics, evaluate_goals
from meowbot.context import MemberReport, ProactiveContextAssembler, Tier, fallback_lines
from meowbot.context.request import Intensity
from meowbot.streak import StreakState, classify_streak

TODAY = date(2025, 8, 26)


def report(name: str, completed: int) -> MemberReport:
    counters = {goal.counter: goal.target for goal in GOAL_CATALOG[:completed]}
    return MemberReport(
        name=name,
        snapshot=evaluate_goals(name.lower(), counters),
        streak=classify_streak(StreakState("2025-08-25", 3), TODAY),
    )


class TestMemberReport:
    def test_describe(self):
        text = report("Om", 8).describe()
        assert "OM'S PERFORMANCE: 8/10 goals (80%)" in text
        assert "AI Topics: 0/1" in text
        assert "3 days" in text

    def test_to_dict(self):
        data = report("Durva", 10).to_dict()
        assert data["is_perfect"]
        assert data["missed_goals"] == []
        assert data["streak"]["status"] == "grace"


class TestFallbackLines:
    def test_one_perfect_names_members(self):
        lines = fallback_lines(Tier.ONE_PERFECT, [report("Om", 10), report("Durva", 4)])
        assert lines[0].startswith("Om completed everything")
        assert lines[1].startswith("Durva, you need")


class TestProactiveContextAssembler:
    def test_assembles_with_tier(self):
        assembler = ProactiveContextAssembler(start_date=date(2025, 8, 16))
        context = assembler.assemble(
            [report("Om", 2), report("Durva", 1)],
            ["[09:00] Om: morning"],
            None,
            TODAY,
        )
        assert context.tier is Tier.TERRIBLE
        assert context.media_category == "furious"
        assert context.day_number == 11
        assert context.request.intensity is Intensity.HIGH
        assert context.request.temperature == 0.8
        assert context.request.max_tokens == 800
        assert context.request.fallback_segments
        assert "Day 11" in context.request.prompt
        assert "Tuesday" in context.request.prompt
        assert "[09:00] Om: morning" in context.request.prompt
        assert "Om and Durva" in context.request.prompt

    def test_study_topics_line(self):
        topics = StudyTopics("Two Pointers", "Operating Systems", "Docker", "Rate Limiter")
        context = ProactiveContextAssembler().assemble(
            [report("Om", 5)], [], None, TODAY, topics
        )
        assert (
            "STUDY TOPICS: Two Pointers | Operating Systems | Docker | Rate Limiter"
            in context.request.prompt
        )

    def test_default_topics_when_omitted(self):
        context = ProactiveContextAssembler().assemble([report("Om", 5)], [], None, TODAY)
        assert f"STUDY TOPICS: {DEFAULT_TOPICS.describe()}" in context.request.prompt

    def test_perfect_is_low_intensity(self):
        context = ProactiveContextAssembler().assemble(
            [report("Om", 10)], [], None, TODAY
        )
        assert context.tier is Tier.PERFECT
        assert context.media_category == "proud"
        assert context.request.intensity is Intensity.LOW
        assert "Recent chat context" not in context.request.prompt
