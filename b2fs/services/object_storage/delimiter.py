"""Helpers for B2-style delimiter grouping of flat file names."""

from __future__ import annotations

from b2fs.services.object_storage.interface import ACTION_FOLDER, ObjectRecord


def folder_of(key: str, prefix: str, delimiter: str | None) -> str | None:
    """Return the pseudo-directory *key* collapses into, or None.

    ``folder_of("a/b/c.txt", "a/", "/") == "a/b/"``.
    """
    if not delimiter:
        return None
    rest = key[len(prefix):]
    idx = rest.find(delimiter)
    if idx == -1:
        return None
    return prefix + rest[: idx + len(delimiter)]


def skip_past(folder: str, delimiter: str) -> str:
    """Smallest start name sorting after every name under *folder*."""
    stem = folder[: -len(delimiter)]
    return stem + chr(ord(delimiter[-1]) + 1)


def folder_record(folder: str) -> ObjectRecord:
    return ObjectRecord(key=folder, action=ACTION_FOLDER, size=0)
