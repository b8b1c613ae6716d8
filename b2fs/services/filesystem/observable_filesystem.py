"""Observable wrapper around FileSystemAdapterInterface that adds metrics.

Records a ``fs_operation_duration_seconds`` histogram for every call and a
``fs_operation_errors_total`` counter for every ``FileSystemError``, both
tagged with the operation name (errors also with the error kind and reason).
Listings are timed from the first pull until the iterator is exhausted or
raises.
"""

from __future__ import annotations

import time
from typing import Any, BinaryIO, Callable, Iterable, Iterator, TypeVar

from b2fs.services.filesystem.attributes import FileAttributes, StorageAttributes
from b2fs.services.filesystem.errors import FileSystemError
from b2fs.services.filesystem.interface import FileSystemAdapterInterface
from b2fs.services.metrics.interface import MetricsInterface

_DURATION = "fs_operation_duration_seconds"
_ERRORS = "fs_operation_errors_total"

T = TypeVar("T")


class _TimedListing(Iterable[StorageAttributes]):
    def __init__(self, owner: ObservableFileSystem, inner: Iterable[StorageAttributes]) -> None:
        self._owner = owner
        self._inner = inner

    def __iter__(self) -> Iterator[StorageAttributes]:
        t0 = time.perf_counter()
        try:
            yield from self._inner
        except FileSystemError as exc:
            self._owner._record_error("list_contents", exc)
            raise
        finally:
            self._owner._record("list_contents", time.perf_counter() - t0)


class ObservableFileSystem(FileSystemAdapterInterface):
    """Transparent wrapper that records timing and error metrics."""

    def __init__(self, inner: FileSystemAdapterInterface, metrics: MetricsInterface) -> None:
        self._inner = inner
        self._metrics = metrics

    # -- Delegation helpers ---------------------------------------------------

    def _record(self, operation: str, elapsed: float) -> None:
        self._metrics.histogram(_DURATION, elapsed, tags={"operation": operation})

    def _record_error(self, operation: str, exc: FileSystemError) -> None:
        self._metrics.counter(
            _ERRORS,
            tags={"operation": operation, "kind": exc.kind.value, "reason": exc.reason.value},
        )

    def _call(self, operation: str, fn: Callable[..., T], *args: Any) -> T:
        t0 = time.perf_counter()
        try:
            return fn(*args)
        except FileSystemError as exc:
            self._record_error(operation, exc)
            raise
        finally:
            self._record(operation, time.perf_counter() - t0)

    # -- FileSystemAdapterInterface -------------------------------------------

    def exists(self, path: str) -> bool:
        return self._call("exists", self._inner.exists, path)

    def directory_exists(self, path: str) -> bool:
        return self._call("directory_exists", self._inner.directory_exists, path)

    def write(self, path: str, contents: bytes) -> None:
        self._call("write", self._inner.write, path, contents)

    def write_stream(self, path: str, stream: BinaryIO) -> None:
        self._call("write_stream", self._inner.write_stream, path, stream)

    def read(self, path: str) -> bytes:
        return self._call("read", self._inner.read, path)

    def read_stream(self, path: str) -> BinaryIO:
        return self._call("read_stream", self._inner.read_stream, path)

    def delete(self, path: str) -> None:
        self._call("delete", self._inner.delete, path)

    def delete_directory(self, path: str) -> None:
        self._call("delete_directory", self._inner.delete_directory, path)

    def create_directory(self, path: str) -> None:
        self._call("create_directory", self._inner.create_directory, path)

    def set_visibility(self, path: str, visibility: str) -> None:
        self._call("set_visibility", self._inner.set_visibility, path, visibility)

    def visibility(self, path: str) -> FileAttributes:
        return self._call("visibility", self._inner.visibility, path)

    def mime_type(self, path: str) -> FileAttributes:
        return self._call("mime_type", self._inner.mime_type, path)

    def last_modified(self, path: str) -> FileAttributes:
        return self._call("last_modified", self._inner.last_modified, path)

    def file_size(self, path: str) -> FileAttributes:
        return self._call("file_size", self._inner.file_size, path)

    def list_contents(self, path: str, deep: bool) -> Iterable[StorageAttributes]:
        try:
            inner = self._inner.list_contents(path, deep)
        except FileSystemError as exc:
            self._record_error("list_contents", exc)
            raise
        return _TimedListing(self, inner)

    def move(self, source: str, destination: str) -> None:
        self._call("move", self._inner.move, source, destination)

    def copy(self, source: str, destination: str) -> None:
        self._call("copy", self._inner.copy, source, destination)

    def health_check(self) -> bool:
        return self._inner.health_check()
