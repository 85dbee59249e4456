"""JSONL event log for pipeline runs."""

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any


@dataclass
class LogEntry:
    """A single log entry."""

    timestamp: str
    event: str
    chat_id: str | None = None
    run: str | None = None
    duration_ms: float | None = None
    processed: int | None = None
    sent_count: int | None = None
    fallback: bool = False
    error: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict, excluding None values."""
        data = asdict(self)
        return {
            k: v
            for k, v in data.items()
            if v is not None and v is not False and v != {} and v != []
        }


class JSONLLogger:
    """Logger that writes structured logs in JSONL format."""

    def __init__(
        self,
        log_dir: str | Path | None = None,
        filename: str = "events.jsonl",
        max_size_mb: float = 10.0,
    ) -> None:
        if log_dir is None:
            log_dir = Path.home() / ".meowbot" / "logs"
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.filename = filename
        self.max_size_bytes = int(max_size_mb * 1024 * 1024)
        self._current_chat_id: str | None = None

    @property
    def log_path(self) -> Path:
        """Current log file path."""
        return self.log_dir / self.filename

    def set_chat_id(self, chat_id: str | None) -> None:
        """Set the current chat_id for all subsequent logs."""
        self._current_chat_id = chat_id

    def _rotate_if_needed(self) -> None:
        """Rotate log file if it exceeds max size."""
        if not self.log_path.exists():
            return

        if self.log_path.stat().st_size >= self.max_size_bytes:
            timestamp = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S_%f")
            rotated_name = f"{self.log_path.stem}_{timestamp}.jsonl"
            self.log_path.rename(self.log_dir / rotated_name)

    def _write(self, entry: LogEntry) -> None:
        """Write a log entry to the file."""
        self._rotate_if_needed()

        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry.to_dict(), ensure_ascii=False) + "\n")

    def log(
        self,
        event: str,
        *,
        chat_id: str | None = None,
        run: str | None = None,
        duration_ms: float | None = None,
        processed: int | None = None,
        sent_count: int | None = None,
        fallback: bool = False,
        error: str | None = None,
        **extra: Any,
    ) -> None:
        """Log an event."""
        entry = LogEntry(
            timestamp=datetime.now(timezone.utc).isoformat(),
            event=event,
            chat_id=chat_id or self._current_chat_id,
            run=run,
            duration_ms=duration_ms,
            processed=processed,
            sent_count=sent_count,
            fallback=fallback,
            error=error,
            extra=extra if extra else {},
        )
        self._write(entry)

    def log_run(
        self,
        run: str,
        *,
        processed: int,
        sent_count: int,
        duration_ms: float,
        fallback: bool = False,
        error: str | None = None,
        chat_id: str | None = None,
    ) -> None:
        """Log the outcome of one agent run."""
        self.log(
            f"{run}_run",
            chat_id=chat_id,
            run=run,
            processed=processed,
            sent_count=sent_count,
            duration_ms=duration_ms,
            fallback=fallback,
            error=error,
        )

    def log_delivery_aborted(
        self,
        run: str,
        *,
        sent_count: int,
        total: int,
        error: str,
        chat_id: str | None = None,
    ) -> None:
        """Log a delivery sequence that stopped before its last segment."""
        self.log(
            "delivery_aborted",
            chat_id=chat_id,
            run=run,
            sent_count=sent_count,
            error=error,
            total=total,
        )


# Global logger instance
_logger: JSONLLogger | None = None


def get_logger() -> JSONLLogger:
    """Get the global logger instance."""
    global _logger
    if _logger is None:
        _logger = JSONLLogger()
    return _logger


def configure_logger(log_dir: str | Path | None = None, max_size_mb: float = 10.0) -> JSONLLogger:
    """Configure and return the global logger."""
    global _logger
    _logger = JSONLLogger(log_dir=log_dir, max_size_mb=max_size_mb)
    return _logger


def reset_logger() -> None:
    """Reset the global logger (for testing)."""
    global _logger
    _logger = None
