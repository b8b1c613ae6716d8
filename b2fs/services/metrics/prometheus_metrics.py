"""Prometheus metrics implementation using prometheus_client."""

from __future__ import annotations

from b2fs.services.metrics.interface import MetricsInterface
from b2fs.services.secrets.interface import SecretsInterface


def _label_names(tags: dict[str, str] | None) -> list[str]:
    return sorted(tags.keys()) if tags else []


def _label_values(names: list[str], tags: dict[str, str] | None) -> list[str]:
    if not tags:
        return []
    return [tags[n] for n in names]


class PrometheusMetrics(MetricsInterface):
    """Metrics backend that exposes adapter metrics via a Prometheus endpoint.

    Config (via secrets):
        METRICS_PROMETHEUS_PORT - Port to expose /metrics on (default: 0,
                                  meaning no HTTP server; a host process
                                  usually already serves the registry).

    Metric names have dashes and dots replaced with underscores.
    """

    def __init__(self, secrets: SecretsInterface) -> None:
        import prometheus_client as prom

        self._prom = prom
        self._registry = prom.CollectorRegistry()
        self._counters: dict[str, prom.Counter] = {}
        self._gauges: dict[str, prom.Gauge] = {}
        self._histograms: dict[str, prom.Histogram] = {}

        port_str = secrets.get_or_default("METRICS_PROMETHEUS_PORT", "0")
        port = int(port_str) if port_str else 0
        if port:
            prom.start_http_server(port, registry=self._registry)

    @property
    def registry(self):
        return self._registry

    @staticmethod
    def _sanitize(name: str) -> str:
        return name.replace("-", "_").replace(".", "_")

    def counter(self, name: str, value: float = 1, tags: dict[str, str] | None = None) -> None:
        safe = self._sanitize(name)
        label_names = _label_names(tags)
        key = f"{safe}:{','.join(label_names)}"
        if key not in self._counters:
            self._counters[key] = self._prom.Counter(
                safe, safe, label_names, registry=self._registry
            )
        c = self._counters[key]
        if label_names:
            c.labels(*_label_values(label_names, tags)).inc(value)
        else:
            c.inc(value)

    def gauge(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        safe = self._sanitize(name)
        label_names = _label_names(tags)
        key = f"{safe}:{','.join(label_names)}"
        if key not in self._gauges:
            self._gauges[key] = self._prom.Gauge(
                safe, safe, label_names, registry=self._registry
            )
        g = self._gauges[key]
        if label_names:
            g.labels(*_label_values(label_names, tags)).set(value)
        else:
            g.set(value)

    def histogram(self, name: str, value: float, tags: dict[str, str] | None = None) -> None:
        safe = self._sanitize(name)
        label_names = _label_names(tags)
        key = f"{safe}:{','.join(label_names)}"
        if key not in self._histograms:
            self._histograms[key] = self._prom.Histogram(
                safe, safe, label_names, registry=self._registry
            )
        h = self._histograms[key]
        if label_names:
            h.labels(*_label_values(label_names, tags)).observe(value)
        else:
            h.observe(value)
