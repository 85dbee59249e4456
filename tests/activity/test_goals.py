"""Tests for goal evaluation."""

from meowbot.activity import COUNTER_FIELDS, GOAL_CATALOG, Goal, evaluate_goals


def all_met() -> dict[str, int]:
    return {goal.counter: goal.target for goal in GOAL_CATALOG}


class TestGoalCatalog:
    def test_catalog_has_ten_goals(self):
        assert len(GOAL_CATALOG) == 10
        assert COUNTER_FIELDS[0] == "coding_questions_attempted"

    def test_targets(self):
        targets = {goal.name: goal.target for goal in GOAL_CATALOG}
        assert targets["Coding Questions"] == 5
        assert targets["Technical Questions"] == 50
        assert targets["System Design"] == 1


class TestEvaluateGoals:
    def test_perfect_day(self):
        snapshot = evaluate_goals("om", all_met())
        assert snapshot.is_perfect
        assert snapshot.completed_count == 10
        assert snapshot.ratio == 1.0
        assert snapshot.missed_goals == []

    def test_empty_counters(self):
        snapshot = evaluate_goals("om", {})
        assert snapshot.completed_count == 0
        assert snapshot.percent == 0.0
        assert len(snapshot.missed_goals) == 10
        assert not snapshot.is_perfect

    def test_missed_goals_in_catalog_order(self):
        counters = all_met()
        counters["coding_questions_attempted"] = 3
        counters["system_design_covered"] = 0
        snapshot = evaluate_goals("durva", counters)
        missed = snapshot.missed_goals
        assert [g.name for g in missed] == ["Coding Questions", "System Design"]
        assert missed[0].shortfall == 2
        assert missed[0].describe() == "Coding Questions: 3/5"

    def test_half_complete(self):
        counters = {goal.counter: goal.target for goal in GOAL_CATALOG[:5]}
        snapshot = evaluate_goals("om", counters)
        assert snapshot.percent == 50.0

    def test_non_numeric_counters_count_as_zero(self):
        snapshot = evaluate_goals("om", {"coding_questions_attempted": "lots"})
        assert snapshot.progress[0].attempted == 0

    def test_custom_catalog(self):
        catalog = (Goal("Pushups", "pushups", 10),)
        snapshot = evaluate_goals("om", {"pushups": 12}, catalog=catalog)
        assert snapshot.is_perfect
        assert snapshot.total == 1
