"""Central registry mapping (interface_name, impl_name) to concrete class paths.

Uses string paths for lazy imports: importing the registry doesn't pull in
b2sdk or prometheus_client unless that implementation is selected.
"""

import importlib
from typing import Any

REGISTRY: dict[str, dict[str, str]] = {
    "client": {
        "memory": "b2fs.services.object_storage.memory_client.MemoryObjectStorageClient",
        "b2": "b2fs.services.object_storage.b2_client.B2ObjectStorageClient",
    },
    "metrics": {
        "noop": "b2fs.services.metrics.noop_metrics.NoopMetrics",
        "memory": "b2fs.services.metrics.memory_metrics.MemoryMetrics",
        "prometheus": "b2fs.services.metrics.prometheus_metrics.PrometheusMetrics",
    },
    "secrets": {
        "env": "b2fs.services.secrets.env_secrets.EnvSecrets",
    },
}

INTERFACE_TYPES: dict[str, str] = {
    "client": "b2fs.services.object_storage.interface.ObjectStorageClientInterface",
    "metrics": "b2fs.services.metrics.interface.MetricsInterface",
    "secrets": "b2fs.services.secrets.interface.SecretsInterface",
}


def resolve_class(dotted_path: str) -> type[Any]:
    """Import and return a class from a dotted module.ClassName path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)


def resolve_implementation(flag_name: str, impl_name: str) -> type[Any]:
    """Look up the concrete class for a given flag and implementation name."""
    impls = REGISTRY.get(flag_name)
    if impls is None:
        raise ValueError(f"Unknown interface flag: {flag_name}")
    dotted = impls.get(impl_name)
    if dotted is None:
        available = ", ".join(impls.keys())
        raise ValueError(
            f"Unknown implementation '{impl_name}' for {flag_name} "
            f"(available: {available})"
        )
    return resolve_class(dotted)


def resolve_interface_type(flag_name: str) -> type[Any]:
    """Return the ABC type for a given flag name."""
    dotted = INTERFACE_TYPES.get(flag_name)
    if dotted is None:
        raise ValueError(f"Unknown interface flag: {flag_name}")
    return resolve_class(dotted)
