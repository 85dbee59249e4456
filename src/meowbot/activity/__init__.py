"""Daily activity counters and goal evaluation."""

from .goals import (
    COUNTER_FIELDS,
    GOAL_CATALOG,
    Goal,
    GoalProgress,
    GoalSnapshot,
    MissedGoal,
    evaluate_goals,
)
from .repository import (
    DEFAULT_TOPICS,
    MemberActivity,
    SQLiteActivityRepository,
    StudyTopics,
    empty_activity,
)

__all__ = [
    "COUNTER_FIELDS",
    "DEFAULT_TOPICS",
    "GOAL_CATALOG",
    "Goal",
    "GoalProgress",
    "GoalSnapshot",
    "MemberActivity",
    "MissedGoal",
    "SQLiteActivityRepository",
    "StudyTopics",
    "empty_activity",
    "evaluate_goals",
]
