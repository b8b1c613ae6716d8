from __future__ import annotations

import os
from pathlib import Path

from b2fs.config.env_loader import load_env_file
from b2fs.services.secrets.interface import SecretsInterface


class EnvSecrets(SecretsInterface):
    """Environment variables, optionally overlaid with explicit values.

    ``require`` treats an empty value as missing: a blank
    ``FS_B2_APPLICATION_KEY`` would otherwise only fail at authorization.
    ``get_or_default`` keeps empty values, so ``FS_B2_FOLDER_MARKER=``
    can select trailing-slash markers.
    """

    def __init__(self, overrides: dict[str, str] | None = None) -> None:
        self._env = {**os.environ, **(overrides or {})}

    @classmethod
    def from_env_file(cls, env_name: str = "local", project_root: Path | None = None) -> EnvSecrets:
        """Environment overlaid with ``.env/<env_name>.env``."""
        return cls(overrides=load_env_file(env_name, project_root))

    def get(self, key: str) -> str | None:
        return self._env.get(key)

    def get_or_default(self, key: str, default: str) -> str:
        value = self._env.get(key)
        return default if value is None else value

    def require(self, key: str) -> str:
        value = self._env.get(key)
        if not value:
            raise KeyError(f"Required secret '{key}' is not set")
        return value
