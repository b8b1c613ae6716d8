"""Builds a ready-to-use B2 filesystem from secrets.

Config (via secrets):
    FS_CLIENT            - Object storage client: ``b2`` (default) or ``memory``
    FS_B2_BUCKET_ID      - Bucket id (required)
    FS_B2_PREFIX         - Root path prefix (default: none)
    FS_B2_FOLDER_MARKER  - Directory marker file name (default: .bzEmpty;
                           empty string for trailing-slash markers)
    FS_METRICS           - ``noop`` (default), ``memory`` or ``prometheus``
    B2FS_ENV             - Name of the .env file to load (default: local)

Client-specific keys are documented on the client classes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from b2fs.services.filesystem.b2_filesystem import B2FileSystem
from b2fs.services.filesystem.interface import FileSystemAdapterInterface
from b2fs.services.filesystem.listing import DEFAULT_FOLDER_MARKER
from b2fs.services.filesystem.observable_filesystem import ObservableFileSystem
from b2fs.services.logger.interface import LoggingInterface
from b2fs.services.registry import resolve_implementation
from b2fs.services.secrets.env_secrets import EnvSecrets
from b2fs.services.secrets.interface import SecretsInterface


@dataclass(frozen=True)
class B2Settings:
    bucket_id: str
    prefix: str = ""
    folder_marker: str = DEFAULT_FOLDER_MARKER
    client: str = "b2"
    metrics: str = "noop"

    @classmethod
    def from_secrets(cls, secrets: SecretsInterface) -> B2Settings:
        return cls(
            bucket_id=secrets.require("FS_B2_BUCKET_ID"),
            prefix=secrets.get_or_default("FS_B2_PREFIX", ""),
            folder_marker=secrets.get_or_default("FS_B2_FOLDER_MARKER", DEFAULT_FOLDER_MARKER),
            client=secrets.get_or_default("FS_CLIENT", "b2"),
            metrics=secrets.get_or_default("FS_METRICS", "noop"),
        )


def default_secrets() -> EnvSecrets:
    return EnvSecrets.from_env_file(os.environ.get("B2FS_ENV", "local"))


def build_filesystem(
    secrets: SecretsInterface | None = None,
    logger: LoggingInterface | None = None,
) -> FileSystemAdapterInterface:
    """Wire client, adapter and (unless ``noop``) the metrics wrapper."""
    secrets = secrets or default_secrets()
    settings = B2Settings.from_secrets(secrets)

    client_cls = resolve_implementation("client", settings.client)
    client = client_cls.from_secrets(secrets)

    fs: FileSystemAdapterInterface = B2FileSystem(
        client,
        settings.bucket_id,
        prefix=settings.prefix,
        folder_marker=settings.folder_marker,
        logger=logger,
    )
    if settings.metrics == "noop":
        return fs

    metrics_cls = resolve_implementation("metrics", settings.metrics)
    metrics = metrics_cls(secrets) if settings.metrics == "prometheus" else metrics_cls()
    return ObservableFileSystem(fs, metrics)
