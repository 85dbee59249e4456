"""Read-only access to externally owned activity tables."""

import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..errors import PersistenceError
from .goals import COUNTER_FIELDS


@dataclass
class MemberActivity:
    """Raw daily counters and streak value for one tracked email."""

    email: str
    counters: dict[str, int] = field(default_factory=dict)
    raw_streak: Any = None


def empty_activity(email: str) -> MemberActivity:
    """Activity for a member with no rows: zero counters and no streak."""
    return MemberActivity(email=email, counters={name: 0 for name in COUNTER_FIELDS})


@dataclass(frozen=True)
class StudyTopics:
    """The programme's study topics for one day."""

    technical: str
    fundamentals: str
    tech_topic: str
    system_design: str

    def describe(self) -> str:
        return " | ".join((self.technical, self.fundamentals, self.tech_topic, self.system_design))

    def to_dict(self) -> dict[str, str]:
        return {
            "technical": self.technical,
            "fundamentals": self.fundamentals,
            "tech_topic": self.tech_topic,
            "system_design": self.system_design,
        }


# Used when the topic tables cannot be read at all.
DEFAULT_TOPICS = StudyTopics(
    technical="Arrays and Strings",
    fundamentals="Data Structures",
    tech_topic="JavaScript",
    system_design="Load Balancer",
)

# (field, table, name column, placeholder for a missing row)
TOPIC_TABLES: tuple[tuple[str, str, str, str], ...] = (
    ("technical", "techq_topics", "topic_name", "Mystery Topic"),
    ("fundamentals", "fundaq_topics", "topic_name", "Unknown Fundamentals"),
    ("tech_topic", "tech_topics", "name", "Some Tech Thing"),
    ("system_design", "system_design", "name", "System Design Challenge"),
)


class SQLiteActivityRepository:
    """Reads the ``users``, ``today`` and topic tables. Never writes.

    ``users`` holds ``id``, ``email`` and a loosely typed ``current_streak``;
    ``today`` holds one row of counters per user id (``uid``). Each topic
    table holds one row per programme day, keyed by the day number.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_connection(self) -> sqlite3.Connection:
        """Get or create the database connection."""
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def fetch(self, emails: list[str]) -> list[MemberActivity]:
        """Fetch activity for each email, in the given order.

        Args:
            emails: Tracked email addresses.

        Returns:
            One MemberActivity per email; unknown emails get zero counters.

        Raises:
            PersistenceError: If the tables cannot be read.
        """
        if not emails:
            return []

        placeholders = ", ".join("?" for _ in emails)
        try:
            conn = self._get_connection()
            users = conn.execute(
                f"SELECT id, email, current_streak FROM users WHERE lower(email) IN ({placeholders})",
                [e.lower() for e in emails],
            ).fetchall()

            user_ids = [row["id"] for row in users]
            today_rows: list[sqlite3.Row] = []
            if user_ids:
                id_placeholders = ", ".join("?" for _ in user_ids)
                today_rows = conn.execute(
                    f"SELECT * FROM today WHERE uid IN ({id_placeholders})",
                    user_ids,
                ).fetchall()
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to read activity: {e}") from e

        users_by_email = {row["email"].lower(): row for row in users}
        today_by_uid = {row["uid"]: row for row in today_rows}

        activities = []
        for email in emails:
            user = users_by_email.get(email.lower())
            if user is None:
                activities.append(empty_activity(email))
                continue

            daily = today_by_uid.get(user["id"])
            counters = {}
            for name in COUNTER_FIELDS:
                value = daily[name] if daily is not None and name in daily.keys() else 0
                counters[name] = value or 0

            activities.append(
                MemberActivity(
                    email=email,
                    counters=counters,
                    raw_streak=user["current_streak"],
                )
            )
        return activities

    def fetch_topics(self, day_number: int) -> StudyTopics:
        """Look up the study topics for a programme day.

        A table without a row for the day yields that table's placeholder.

        Raises:
            PersistenceError: If a topic table cannot be read.
        """
        names = {}
        try:
            conn = self._get_connection()
            for field_name, table, column, placeholder in TOPIC_TABLES:
                row = conn.execute(
                    f"SELECT {column} FROM {table} WHERE id = ?", (day_number,)
                ).fetchone()
                names[field_name] = (row[column] if row is not None else None) or placeholder
        except sqlite3.Error as e:
            raise PersistenceError(f"Failed to read study topics: {e}") from e
        return StudyTopics(**names)

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
