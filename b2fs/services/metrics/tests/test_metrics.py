import pytest

from b2fs.services.metrics.memory_metrics import MemoryMetrics
from b2fs.services.metrics.noop_metrics import NoopMetrics
from b2fs.services.secrets.env_secrets import EnvSecrets


def test_memory_counter_accumulates():
    m = MemoryMetrics()
    m.counter("fs_operation_errors_total")
    m.counter("fs_operation_errors_total", 2, tags={"operation": "read"})
    assert m.counters["fs_operation_errors_total"] == 3
    assert m.tags_for("fs_operation_errors_total") == [{}, {"operation": "read"}]


def test_memory_gauge_and_histogram():
    m = MemoryMetrics()
    m.gauge("pages", 4)
    m.histogram("fs_operation_duration_seconds", 0.5)
    m.histogram("fs_operation_duration_seconds", 0.25)
    assert m.gauges["pages"] == 4
    assert m.histograms["fs_operation_duration_seconds"] == [0.5, 0.25]


def test_noop_metrics_accepts_everything():
    m = NoopMetrics()
    m.counter("x")
    m.gauge("x", 1)
    m.histogram("x", 1, tags={"a": "b"})


def test_prometheus_metrics_records_labels():
    pytest.importorskip("prometheus_client")
    from b2fs.services.metrics.prometheus_metrics import PrometheusMetrics

    metrics = PrometheusMetrics(EnvSecrets(overrides={"METRICS_PROMETHEUS_PORT": "0"}))
    metrics.counter("fs.operation-errors", tags={"operation": "read"})
    metrics.counter("fs.operation-errors", tags={"operation": "read"})

    value = metrics.registry.get_sample_value(
        "fs_operation_errors_total", {"operation": "read"}
    )
    assert value == 2
