"""Tests for environment configuration."""

from datetime import date
from pathlib import Path

from meowbot.config import DEFAULT_MODEL, Member, config_from_env, match_member, parse_members


class TestParseMembers:
    def test_pairs_with_and_without_email(self):
        members = parse_members("Om=OM@example.com, Durva")
        assert members == [
            Member(name="Om", email="om@example.com"),
            Member(name="Durva", email=None),
        ]

    def test_empty_chunks_skipped(self):
        assert parse_members(" , ,") == []

    def test_member_key_is_lowercase(self):
        assert Member(name=" Durva ").key == "durva"


class TestMatchMember:
    def test_matches_case_insensitively(self):
        members = [Member("Om"), Member("Durva")]
        assert match_member(members, "om").name == "Om"
        assert match_member(members, " DURVA ").name == "Durva"
        assert match_member(members, "Bob") is None
        assert match_member(members, None) is None


class TestConfigFromEnv:
    def test_defaults(self, monkeypatch):
        for var in (
            "GROQ_MODEL",
            "MEOWBOT_MEMBERS",
            "MEOWBOT_UTC_OFFSET_HOURS",
            "MEOWBOT_START_DATE",
            "MEOWBOT_PAGE_SIZE",
            "MEOWBOT_PORT",
        ):
            monkeypatch.delenv(var, raising=False)
        settings = config_from_env()
        assert settings.generation.model == DEFAULT_MODEL
        assert settings.utc_offset_hours == 5.5
        assert settings.start_date == date(2025, 8, 16)
        assert settings.telegram.page_size == 100
        assert settings.port == 8080
        assert settings.members == []

    def test_reads_environment(self, monkeypatch, tmp_path: Path):
        monkeypatch.setenv("TELEGRAM_TOKEN", "tok")
        monkeypatch.setenv("TELEGRAM_CHAT_ID", "-100")
        monkeypatch.setenv("BOT_USERNAME", "Meow")
        monkeypatch.setenv("API_KEY", "secret")
        monkeypatch.setenv("MEOWBOT_DB_PATH", str(tmp_path / "x.db"))
        monkeypatch.setenv("MEOWBOT_MEMBERS", "Om=om@example.com")
        monkeypatch.setenv("MEOWBOT_UTC_OFFSET_HOURS", "0")
        monkeypatch.setenv("MEOWBOT_START_DATE", "2025-01-01")
        settings = config_from_env()
        assert settings.telegram.token == "tok"
        assert settings.telegram.chat_id == "-100"
        assert settings.telegram.bot_username == "Meow"
        assert settings.api_key == "secret"
        assert settings.db_path == tmp_path / "x.db"
        assert settings.members[0].email == "om@example.com"
        assert settings.utc_offset_hours == 0.0
        assert settings.start_date == date(2025, 1, 1)
