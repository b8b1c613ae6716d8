from b2fs.services.metrics.interface import MetricsInterface


class NoopMetrics(MetricsInterface):
    """Selected by ``FS_METRICS=noop``; the factory then skips the metrics wrapper."""

    def counter(self, name: str, value: float = 1, tags: dict[str, str] | None = None) -> None:
        return None

    def gauge(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        return None

    def histogram(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        return None
