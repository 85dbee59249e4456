"""Daily goal evaluation from activity counters."""

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Goal:
    """A daily goal: the counter it reads and the target to reach."""

    name: str
    counter: str
    target: int


GOAL_CATALOG: tuple[Goal, ...] = (
    Goal("Coding Questions", "coding_questions_attempted", 5),
    Goal("Technical Questions", "technical_questions_attempted", 50),
    Goal("Fundamental Questions", "fundamental_questions_attempted", 50),
    Goal("Aptitude Questions", "aptitude_questions_attempted", 50),
    Goal("Java Topics", "java_lang_covered", 1),
    Goal("Python Topics", "python_lang_covered", 1),
    Goal("SQL Topics", "sql_lang_covered", 1),
    Goal("HR Questions", "hr_questions_attempted", 1),
    Goal("AI Topics", "artificial_intelligence_topics_covered", 1),
    Goal("System Design", "system_design_covered", 1),
)

COUNTER_FIELDS: tuple[str, ...] = tuple(goal.counter for goal in GOAL_CATALOG)


@dataclass(frozen=True)
class GoalProgress:
    name: str
    attempted: int
    target: int

    @property
    def completed(self) -> bool:
        return self.attempted >= self.target


@dataclass(frozen=True)
class MissedGoal:
    name: str
    attempted: int
    target: int

    @property
    def shortfall(self) -> int:
        return self.target - self.attempted

    def describe(self) -> str:
        return f"{self.name}: {self.attempted}/{self.target}"


@dataclass(frozen=True)
class GoalSnapshot:
    """One entity's progress against the goal catalog for a day."""

    entity: str
    progress: tuple[GoalProgress, ...] = field(default_factory=tuple)

    @property
    def total(self) -> int:
        return len(self.progress)

    @property
    def completed_count(self) -> int:
        return sum(1 for p in self.progress if p.completed)

    @property
    def ratio(self) -> float:
        """Completed share of goals, from 0.0 to 1.0."""
        if not self.progress:
            return 0.0
        return self.completed_count / self.total

    @property
    def percent(self) -> float:
        return self.ratio * 100

    @property
    def missed_goals(self) -> list[MissedGoal]:
        """Goals short of target, in catalog order."""
        return [
            MissedGoal(p.name, p.attempted, p.target)
            for p in self.progress
            if not p.completed
        ]

    @property
    def is_perfect(self) -> bool:
        return bool(self.progress) and self.completed_count == self.total


def _counter_value(value: object) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return max(0, int(value))
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return 0


def evaluate_goals(
    entity: str,
    counters: Mapping[str, object],
    catalog: tuple[Goal, ...] = GOAL_CATALOG,
) -> GoalSnapshot:
    """Evaluate daily counters against a goal catalog.

    Args:
        entity: Name of the tracked person.
        counters: Raw counter values keyed by counter name; missing or
            non-numeric values count as zero.
        catalog: Goals to evaluate, in display order.

    Returns:
        The entity's GoalSnapshot.
    """
    progress = tuple(
        GoalProgress(
            name=goal.name,
            attempted=_counter_value(counters.get(goal.counter)),
            target=goal.target,
        )
        for goal in catalog
    )
    return GoalSnapshot(entity=entity, progress=progress)
