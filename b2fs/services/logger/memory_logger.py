from dataclasses import dataclass, field
from typing import Any

from b2fs.services.logger.interface import LoggingInterface


@dataclass(frozen=True)
class LogEntry:
    level: str
    msg: str
    ctx: dict[str, Any] = field(default_factory=dict)


class MemoryLogger(LoggingInterface):
    """Collects entries so tests can assert on what the adapter reported."""

    def __init__(self) -> None:
        self.entries: list[LogEntry] = []

    def debug(self, msg: str, **ctx: Any) -> None:
        self._append("DEBUG", msg, ctx)

    def info(self, msg: str, **ctx: Any) -> None:
        self._append("INFO", msg, ctx)

    def warn(self, msg: str, **ctx: Any) -> None:
        self._append("WARN", msg, ctx)

    def error(self, msg: str, **ctx: Any) -> None:
        self._append("ERROR", msg, ctx)

    def _append(self, level: str, msg: str, ctx: dict[str, Any]) -> None:
        self.entries.append(LogEntry(level, msg, dict(ctx)))

    @property
    def messages(self) -> list[str]:
        return [e.msg for e in self.entries]

    def at_level(self, level: str) -> list[LogEntry]:
        level = level.upper()
        return [e for e in self.entries if e.level == level]

    def find(self, msg: str) -> list[LogEntry]:
        """Entries whose message equals *msg*."""
        return [e for e in self.entries if e.msg == msg]

    def clear(self) -> None:
        self.entries.clear()
