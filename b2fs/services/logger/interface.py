from abc import ABC, abstractmethod
from typing import Any


class LoggingInterface(ABC):
    """Message plus keyword context, e.g. ``log.error("...", path=p, kind=k)``.

    Normalized failures are logged at error. Partial moves and failed
    health checks are logged at warn.
    """

    @abstractmethod
    def debug(self, msg: str, **ctx: Any) -> None: ...

    @abstractmethod
    def info(self, msg: str, **ctx: Any) -> None: ...

    @abstractmethod
    def warn(self, msg: str, **ctx: Any) -> None: ...

    @abstractmethod
    def error(self, msg: str, **ctx: Any) -> None: ...
