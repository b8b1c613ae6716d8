from __future__ import annotations

from b2fs.services.logger.interface import LoggingInterface
from b2fs.services.logger.memory_logger import MemoryLogger
from b2fs.services.logger.pretty_logger import PrettyLogger


class LoggerFactory:
    """Builds the logger an adapter falls back to when none is injected.

    ``pretty`` writes to stderr above *level* (``LOG_LEVEL`` when omitted);
    ``memory`` keeps entries for tests. One instance is kept per name, so
    components built from the same factory share a sink.
    """

    _implementations: dict[str, type[LoggingInterface]] = {
        "pretty": PrettyLogger,
        "memory": MemoryLogger,
    }

    def __init__(self, default_impl: str = "pretty", level: str | None = None) -> None:
        self._check(default_impl)
        self._default_impl = default_impl
        self._level = level
        self._instances: dict[str, LoggingInterface] = {}

    def create(self, impl_name: str | None = None) -> LoggingInterface:
        name = impl_name or self._default_impl
        logger = self._instances.get(name)
        if logger is None:
            self._check(name)
            logger = PrettyLogger(self._level) if name == "pretty" else self._implementations[name]()
            self._instances[name] = logger
        return logger

    @classmethod
    def _check(cls, name: str) -> None:
        if name not in cls._implementations:
            raise ValueError(
                f"Unknown logger implementation: '{name}' "
                f"(available: {', '.join(cls._implementations)})"
            )
