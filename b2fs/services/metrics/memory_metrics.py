from __future__ import annotations

from b2fs.services.metrics.interface import MetricsInterface


class MemoryMetrics(MetricsInterface):
    """In-memory metrics for test assertions on metric values and tags."""

    def __init__(self) -> None:
        self.counters: dict[str, float] = {}
        self.gauges: dict[str, float] = {}
        self.histograms: dict[str, list[float]] = {}
        # (name, tags) for every call, in order
        self.calls: list[tuple[str, dict[str, str]]] = []

    def counter(self, name: str, value: float = 1, tags: dict[str, str] | None = None) -> None:
        self.counters[name] = self.counters.get(name, 0) + value
        self.calls.append((name, dict(tags or {})))

    def gauge(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        self.gauges[name] = value
        self.calls.append((name, dict(tags or {})))

    def histogram(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        if name not in self.histograms:
            self.histograms[name] = []
        self.histograms[name].append(value)
        self.calls.append((name, dict(tags or {})))

    def tags_for(self, name: str) -> list[dict[str, str]]:
        return [tags for n, tags in self.calls if n == name]
