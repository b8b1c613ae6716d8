from __future__ import annotations

from abc import ABC, abstractmethod
from typing import BinaryIO, Iterable

from b2fs.services.filesystem.attributes import FileAttributes, StorageAttributes


class FileSystemAdapterInterface(ABC):
    """Path-based file storage contract.

    Every failure is raised as ``FileSystemError``; see ``errors.py``.
    """

    @abstractmethod
    def exists(self, path: str) -> bool:
        """True if a file exists at *path*. A missing file is not an error."""
        ...

    @abstractmethod
    def directory_exists(self, path: str) -> bool: ...

    @abstractmethod
    def write(self, path: str, contents: bytes) -> None:
        """Write a whole file; the content type is detected from path and bytes."""
        ...

    @abstractmethod
    def write_stream(self, path: str, stream: BinaryIO) -> None: ...

    @abstractmethod
    def read(self, path: str) -> bytes: ...

    @abstractmethod
    def read_stream(self, path: str) -> BinaryIO:
        """Open *path* for reading. The caller closes the stream."""
        ...

    @abstractmethod
    def delete(self, path: str) -> None: ...

    @abstractmethod
    def delete_directory(self, path: str) -> None: ...

    @abstractmethod
    def create_directory(self, path: str) -> None: ...

    @abstractmethod
    def set_visibility(self, path: str, visibility: str) -> None: ...

    @abstractmethod
    def visibility(self, path: str) -> FileAttributes: ...

    @abstractmethod
    def mime_type(self, path: str) -> FileAttributes: ...

    @abstractmethod
    def last_modified(self, path: str) -> FileAttributes: ...

    @abstractmethod
    def file_size(self, path: str) -> FileAttributes: ...

    @abstractmethod
    def list_contents(self, path: str, deep: bool) -> Iterable[StorageAttributes]:
        """Lazily list files and directories under *path*."""
        ...

    @abstractmethod
    def move(self, source: str, destination: str) -> None:
        """Copy then delete. Not atomic: a failed delete leaves both copies."""
        ...

    @abstractmethod
    def copy(self, source: str, destination: str) -> None: ...

    @abstractmethod
    def health_check(self) -> bool: ...
