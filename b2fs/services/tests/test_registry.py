import pytest

from b2fs.services.metrics.interface import MetricsInterface
from b2fs.services.metrics.memory_metrics import MemoryMetrics
from b2fs.services.object_storage.interface import ObjectStorageClientInterface
from b2fs.services.object_storage.memory_client import MemoryObjectStorageClient
from b2fs.services.registry import (
    REGISTRY,
    resolve_implementation,
    resolve_interface_type,
)


def test_resolve_memory_client():
    assert resolve_implementation("client", "memory") is MemoryObjectStorageClient


def test_resolve_memory_metrics():
    assert resolve_implementation("metrics", "memory") is MemoryMetrics


def test_unknown_flag():
    with pytest.raises(ValueError, match="Unknown interface flag"):
        resolve_implementation("cache", "memory")


def test_unknown_implementation_lists_available():
    with pytest.raises(ValueError, match="available: memory, b2"):
        resolve_implementation("client", "s3")


def test_interface_types():
    assert resolve_interface_type("client") is ObjectStorageClientInterface
    assert resolve_interface_type("metrics") is MetricsInterface
    with pytest.raises(ValueError):
        resolve_interface_type("cache")


def test_every_flag_has_an_interface_type():
    for flag in REGISTRY:
        assert isinstance(resolve_interface_type(flag), type)


@pytest.mark.parametrize("flag, impl", [("client", "memory"), ("metrics", "noop"), ("secrets", "env")])
def test_implementations_satisfy_interface(flag, impl):
    assert issubclass(resolve_implementation(flag, impl), resolve_interface_type(flag))
