"""Reads ``.env/<name>.env`` files holding B2 credentials for local runs.

One ``KEY=VALUE`` per line, with an optional ``export`` prefix. Lines
starting with ``#`` and blank lines are skipped, and a value wrapped in
matching quotes is unwrapped. Everything after the first ``=`` belongs to
the value, ``#`` included, since B2 application keys may contain it.
"""

from pathlib import Path
from typing import Iterator

# Project root: two levels up from b2fs/config/
_PROJECT_ROOT = Path(__file__).resolve().parents[2]
_EXPORT = "export "


def env_file_path(env_name: str = "local", project_root: Path | None = None) -> Path:
    return (project_root or _PROJECT_ROOT) / ".env" / f"{env_name}.env"


def load_env_file(env_name: str = "local", project_root: Path | None = None) -> dict[str, str]:
    """Parsed contents of the named env file, or ``{}`` when there is none."""
    path = env_file_path(env_name, project_root)
    if not path.is_file():
        return {}
    return dict(_pairs(path.read_text(encoding="utf-8")))


def _pairs(text: str) -> Iterator[tuple[str, str]]:
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith(_EXPORT):
            line = line[len(_EXPORT):].lstrip()
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        yield key, _unquote(value.strip())


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value
