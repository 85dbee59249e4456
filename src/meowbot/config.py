"""Configuration loaded from environment variables."""

import os
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

DEFAULT_DB_PATH = Path.home() / ".meowbot" / "meowbot.db"
DEFAULT_LOG_DIR = Path.home() / ".meowbot" / "logs"
DEFAULT_MODEL = "llama-3.3-70b-versatile"


@dataclass(frozen=True)
class Member:
    """A person the agent talks to and tracks.

    Attributes:
        name: Display name, matched against the sender's first name.
        email: Address used to look up daily activity, if tracked.
    """

    name: str
    email: str | None = None

    @property
    def key(self) -> str:
        """Entity key used for per-member memory notes."""
        return self.name.strip().lower()


@dataclass
class TelegramConfig:
    """Chat source and sink settings."""

    token: str | None = None
    chat_id: str = ""
    bot_username: str = ""
    page_size: int = 100


@dataclass
class GenerationConfig:
    """Generation call settings."""

    api_key: str | None = None
    model: str = DEFAULT_MODEL
    reply_temperature: float = 0.9
    reply_max_tokens: int = 600
    roast_temperature: float = 0.8
    roast_max_tokens: int = 800


@dataclass
class PacingConfig:
    """Delay bands, in seconds, between delivered segments."""

    text_min: float = 1.5
    text_max: float = 2.5
    media_min: float = 3.0
    media_max: float = 4.0


@dataclass
class Settings:
    """Top-level settings for the agents and the trigger server."""

    telegram: TelegramConfig = field(default_factory=TelegramConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    pacing: PacingConfig = field(default_factory=PacingConfig)
    api_key: str | None = None
    db_path: Path = DEFAULT_DB_PATH
    log_dir: Path = DEFAULT_LOG_DIR
    members: list[Member] = field(default_factory=list)
    utc_offset_hours: float = 5.5
    start_date: date = date(2025, 8, 16)
    host: str = "127.0.0.1"
    port: int = 8080


def match_member(members: list[Member], first_name: str | None) -> Member | None:
    """Return the member whose name matches a sender's first name, ignoring case."""
    if not first_name:
        return None
    wanted = first_name.strip().lower()
    for member in members:
        if member.key == wanted:
            return member
    return None


def parse_members(raw: str) -> list[Member]:
    """Parse ``Name=email`` pairs separated by commas.

    The email part is optional: ``"Om=om@example.com, Durva"`` is valid.
    """
    members = []
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        name, _, email = chunk.partition("=")
        name = name.strip()
        if not name:
            continue
        members.append(Member(name=name, email=email.strip().lower() or None))
    return members


def config_from_env() -> Settings:
    """Load settings from environment variables."""
    telegram = TelegramConfig(
        token=os.getenv("TELEGRAM_TOKEN"),
        chat_id=os.getenv("TELEGRAM_CHAT_ID", ""),
        bot_username=os.getenv("BOT_USERNAME", ""),
        page_size=int(os.getenv("MEOWBOT_PAGE_SIZE", "100")),
    )

    generation = GenerationConfig(
        api_key=os.getenv("GROQ_API_KEY"),
        model=os.getenv("GROQ_MODEL", DEFAULT_MODEL),
    )

    return Settings(
        telegram=telegram,
        generation=generation,
        api_key=os.getenv("API_KEY"),
        db_path=Path(os.getenv("MEOWBOT_DB_PATH", str(DEFAULT_DB_PATH))).expanduser(),
        log_dir=Path(os.getenv("MEOWBOT_LOG_DIR", str(DEFAULT_LOG_DIR))).expanduser(),
        members=parse_members(os.getenv("MEOWBOT_MEMBERS", "")),
        utc_offset_hours=float(os.getenv("MEOWBOT_UTC_OFFSET_HOURS", "5.5")),
        start_date=date.fromisoformat(os.getenv("MEOWBOT_START_DATE", "2025-08-16")),
        host=os.getenv("MEOWBOT_HOST", "127.0.0.1"),
        port=int(os.getenv("MEOWBOT_PORT", "8080")),
    )
