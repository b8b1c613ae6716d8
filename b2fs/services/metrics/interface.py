from __future__ import annotations

from abc import ABC, abstractmethod


class MetricsInterface(ABC):
    """Sink for the adapter's operation metrics.

    ``ObservableFileSystem`` emits one histogram sample per call
    (``fs_operation_duration_seconds``) and one counter increment per failed
    call (``fs_operation_errors_total``). Tags are low-cardinality labels such
    as the operation name or error kind, never paths.
    """

    @abstractmethod
    def counter(self, name: str, value: float = 1, tags: dict[str, str] | None = None) -> None:
        """Add *value* to a monotonically increasing count."""
        ...

    @abstractmethod
    def gauge(self, name: str, value: float, tags: dict[str, str] | None = None) -> None: ...

    @abstractmethod
    def histogram(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        """Observe one sample (durations are in seconds)."""
        ...
