"""Directory listing over a flat, paginated, action-tagged object stream.

B2 has no directories. A delimiter listing returns real uploads plus
``folder`` entries for every common prefix; this module turns that stream
into file and directory attributes:

- every pseudo-directory yields exactly one ``DirectoryAttributes``
- deep listings descend into each one right after yielding it (pre-order)
- shallow listings never descend
- the listed directory's own marker and folder-marker files are hidden
- actions other than ``upload`` and ``folder`` are ignored

Descent keeps an explicit stack of pagination frames instead of recursing,
and a page is only fetched when the consumer pulls past the previous one.
"""

from __future__ import annotations

import re
from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from b2fs.services.filesystem.attributes import AttributeMapper, StorageAttributes
from b2fs.services.filesystem.errors import ErrorKind, FailureReason, FileSystemError
from b2fs.services.filesystem.path_prefixer import DELIMITER, PathPrefixer
from b2fs.services.logger.interface import LoggingInterface
from b2fs.services.object_storage.interface import (
    ACTION_FOLDER,
    ACTION_UPLOAD,
    BackendError,
    ObjectNotFound,
    ObjectRecord,
    ObjectStorageClientInterface,
)

PAGE_SIZE = 100
DEFAULT_FOLDER_MARKER = ".bzEmpty"

_OPERATION = "list contents of"


@dataclass
class _Frame:
    """Pagination state for one directory prefix."""

    prefix: str
    cursor: str | None = None
    pending: deque[ObjectRecord] = field(default_factory=deque)
    exhausted: bool = False


class DirectoryListing(Iterable[StorageAttributes]):
    """Restartable listing: every ``iter()`` starts a fresh backend walk."""

    def __init__(self, engine: ListingEngine, path: str, deep: bool) -> None:
        self._engine = engine
        self.path = path
        self.deep = deep

    def __iter__(self) -> Iterator[StorageAttributes]:
        return self._engine.iterate(self.path, self.deep)


class ListingEngine:
    def __init__(
        self,
        client: ObjectStorageClientInterface,
        bucket_id: str,
        prefixer: PathPrefixer,
        mapper: AttributeMapper,
        logger: LoggingInterface,
        folder_marker: str = DEFAULT_FOLDER_MARKER,
        page_size: int = PAGE_SIZE,
        delimiter: str = DELIMITER,
    ) -> None:
        self._client = client
        self._bucket_id = bucket_id
        self._prefixer = prefixer
        self._mapper = mapper
        self.log = logger
        self._folder_marker = folder_marker
        self._page_size = page_size
        self._delimiter = delimiter

    def list(self, path: str, deep: bool) -> DirectoryListing:
        if not isinstance(deep, bool):
            raise FileSystemError(
                ErrorKind.INVALID_ARGUMENT,
                _OPERATION,
                path,
                reason=FailureReason.INVALID_ARGUMENT,
                message=f"deep must be a bool, got {deep!r}",
            )
        return DirectoryListing(self, path, deep)

    def matcher(self, path: str, deep: bool) -> re.Pattern[str]:
        """Key filter for a listing of *path*.

        deep/root: any key. deep/P: keys strictly under ``P/``.
        shallow/root: keys without a delimiter. shallow/P: keys directly
        under ``P/`` with no further delimiter.
        """
        key = self._prefixer.strip_directory_prefix(path)
        delim = re.escape(self._delimiter)
        no_delim = f"(?:(?!{delim}).)+"
        if deep and not key:
            pattern = ".*"
        elif deep:
            pattern = re.escape(key) + delim + ".+"
        elif not key:
            pattern = no_delim
        else:
            pattern = re.escape(key) + delim + no_delim
        return re.compile(pattern, re.DOTALL)

    def iterate(self, path: str, deep: bool) -> Iterator[StorageAttributes]:
        matcher = self.matcher(path, deep)
        stack = [_Frame(self._prefixer.directory_key(path))]

        while stack:
            frame = stack[-1]
            if not frame.pending:
                if frame.exhausted:
                    stack.pop()
                else:
                    self._fetch(frame, path)
                continue

            record = frame.pending.popleft()
            if record.action == ACTION_UPLOAD:
                if record.key == frame.prefix or self.is_marker(record.key):
                    continue
                if matcher.fullmatch(record.key):
                    yield self._mapper.to_file_attributes(record)
            elif record.action == ACTION_FOLDER:
                if record.key == frame.prefix:
                    continue
                yield self._mapper.to_directory_attributes(record.key)
                if deep:
                    stack.append(_Frame(record.key))

    def is_marker(self, key: str) -> bool:
        """Zero-byte objects that only exist to make a directory visible."""
        if key.endswith(self._delimiter):
            return True
        if not self._folder_marker:
            return False
        return key == self._folder_marker or key.endswith(self._delimiter + self._folder_marker)

    def _fetch(self, frame: _Frame, path: str) -> None:
        try:
            page = self._client.list_filenames(
                self._bucket_id,
                self._page_size,
                frame.prefix,
                self._delimiter,
                frame.cursor,
            )
        except BackendError as exc:
            reason = FailureReason.NOT_FOUND if isinstance(exc, ObjectNotFound) else FailureReason.BACKEND
            self.log.error(
                "Listing page fetch failed",
                path=path,
                prefix=frame.prefix,
                error=str(exc),
            )
            raise FileSystemError(
                ErrorKind.LIST_FAILED, _OPERATION, path, reason=reason, cause=exc
            ) from exc

        self.log.debug(
            "Fetched listing page",
            prefix=frame.prefix,
            records=len(page.records),
            more=page.next_cursor is not None,
        )
        frame.pending.extend(page.records)
        frame.cursor = page.next_cursor
        frame.exhausted = page.next_cursor is None
