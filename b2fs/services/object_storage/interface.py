"""Object-storage client contract consumed by the B2 filesystem adapter.

The shapes mirror the native B2 API: objects are addressed by bucket id and
file name, every stored revision carries an ``action`` and a backend file id,
and listing is a flat, paginated stream of file names that the backend may
group into ``folder`` entries when a delimiter is given.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Iterator

ACTION_UPLOAD = "upload"
ACTION_FOLDER = "folder"
ACTION_HIDE = "hide"
ACTION_START = "start"

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class BackendError(Exception):
    """Generic backend failure (network, auth, service)."""


class ObjectNotFound(BackendError):
    """The requested file, revision or bucket does not exist."""


@dataclass(frozen=True)
class ObjectRecord:
    key: str
    action: str = ACTION_UPLOAD
    size: int | None = None
    content_type: str | None = None
    content_sha1: str | None = None
    revision_id: str | None = None
    file_info: dict[str, Any] = field(default_factory=dict, hash=False)
    upload_timestamp: int = 0


@dataclass(frozen=True)
class BucketRecord:
    bucket_id: str
    bucket_name: str


@dataclass(frozen=True)
class ListPage:
    records: list[ObjectRecord]
    next_cursor: str | None = None


class ObjectStorageClientInterface(ABC):
    """Native B2-style object API. Implementations raise ``ObjectNotFound``
    or ``BackendError`` and nothing else."""

    @abstractmethod
    def get_file_by_name(self, key: str, bucket_id: str) -> ObjectRecord:
        """Latest uploaded revision of *key*. Raises ObjectNotFound."""
        ...

    @abstractmethod
    def list_filenames(
        self,
        bucket_id: str,
        page_size: int,
        start_path: str,
        delimiter: str | None,
        cursor: str | None = None,
    ) -> ListPage:
        """One page of names under the *start_path* prefix.

        With a delimiter, names containing it past the prefix collapse into
        a single ``folder`` record. ``next_cursor`` is None on the last page.
        """
        ...

    @abstractmethod
    def upload_file(
        self,
        key: str,
        bucket_id: str,
        content: bytes | BinaryIO,
        content_type: str | None = None,
        file_info: dict[str, Any] | None = None,
    ) -> ObjectRecord: ...

    @abstractmethod
    def download_file_by_name(self, key: str, bucket_name: str) -> BinaryIO: ...

    @abstractmethod
    def delete_file(
        self,
        key: str,
        bucket_id: str,
        revision_id: str | None = None,
        all_revisions: bool = False,
    ) -> None:
        """Delete one revision (given or latest) or every revision of *key*."""
        ...

    @abstractmethod
    def copy_file(self, revision_id: str, dest_key: str) -> ObjectRecord: ...

    @abstractmethod
    def list_buckets(self, bucket_id: str) -> list[BucketRecord]: ...

    def get_file_by_prefix(self, prefix: str, bucket_id: str) -> Iterator[ObjectRecord]:
        """All delimiter-grouped records under *prefix*, across pages."""
        cursor: str | None = None
        while True:
            page = self.list_filenames(bucket_id, 100, prefix, "/", cursor)
            yield from page.records
            if page.next_cursor is None:
                return
            cursor = page.next_cursor
