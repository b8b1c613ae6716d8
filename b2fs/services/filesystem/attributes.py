"""Normalized file and directory attribute records.

B2 exposes no per-object visibility through the native API, so every record
reports ``"public"``; that is a limitation of the backend, not a default
that can be changed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from b2fs.services.filesystem.path_prefixer import DELIMITER
from b2fs.services.object_storage.interface import DEFAULT_CONTENT_TYPE, ObjectRecord

VISIBILITY_PUBLIC = "public"

SRC_LAST_MODIFIED_MILLIS = "src_last_modified_millis"


@dataclass(frozen=True)
class FileAttributes:
    path: str
    file_size: int | None = None
    visibility: str = VISIBILITY_PUBLIC
    last_modified: int = 0
    mime_type: str | None = None
    extra_metadata: dict[str, Any] = field(default_factory=dict, hash=False)

    is_file = True
    is_dir = False


@dataclass(frozen=True)
class DirectoryAttributes:
    path: str
    visibility: str = VISIBILITY_PUBLIC

    is_file = False
    is_dir = True


StorageAttributes = FileAttributes | DirectoryAttributes


def _seconds_from_millis(value: Any) -> int:
    try:
        millis = int(value)
    except (TypeError, ValueError):
        return 0
    return -(-millis // 1000)


class AttributeMapper:
    """Turns backend object records into normalized attributes."""

    def __init__(self, delimiter: str = DELIMITER) -> None:
        self._delimiter = delimiter

    def to_file_attributes(self, record: ObjectRecord) -> FileAttributes:
        return FileAttributes(
            path=record.key,
            file_size=record.size if record.size is not None else 0,
            visibility=VISIBILITY_PUBLIC,
            last_modified=self.last_modified(record),
            mime_type=record.content_type or DEFAULT_CONTENT_TYPE,
            extra_metadata={
                "contentHash": record.content_sha1,
                "revisionId": record.revision_id,
            },
        )

    def to_directory_attributes(self, key: str) -> DirectoryAttributes:
        return DirectoryAttributes(path=key.rstrip(self._delimiter))

    @staticmethod
    def last_modified(record: ObjectRecord) -> int:
        """Seconds, rounded up, from the uploader's source mtime; else 0."""
        if SRC_LAST_MODIFIED_MILLIS not in record.file_info:
            return 0
        return _seconds_from_millis(record.file_info[SRC_LAST_MODIFIED_MILLIS])
