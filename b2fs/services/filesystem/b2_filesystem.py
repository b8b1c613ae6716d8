"""Filesystem adapter over the native Backblaze B2 API.

Paths are translated to bucket keys by ``PathPrefixer``; every backend
call is wrapped so failures leave as ``FileSystemError`` carrying the
operation, the logical path and the backend cause. Only a not-found during
an existence check is a normal outcome (``False``).

Directories are emulated with zero-byte marker objects. The marker
convention is configurable:

    folder_marker=".bzEmpty"  -> ``dir/.bzEmpty`` (what the B2 web UI creates)
    folder_marker=""          -> ``dir/``

``move`` is copy-then-delete and is not atomic: when the delete fails the
object exists at both locations and ``MOVE_FAILED`` is raised.
"""

from __future__ import annotations

import threading
from typing import BinaryIO

from b2fs.services.filesystem.attributes import AttributeMapper, FileAttributes
from b2fs.services.filesystem.errors import ErrorKind, FailureReason, FileSystemError
from b2fs.services.filesystem.interface import FileSystemAdapterInterface
from b2fs.services.filesystem.listing import (
    DEFAULT_FOLDER_MARKER,
    DirectoryListing,
    ListingEngine,
)
from b2fs.services.filesystem.path_prefixer import DELIMITER, PathPrefixer
from b2fs.services.logger.factory import LoggerFactory
from b2fs.services.logger.interface import LoggingInterface
from b2fs.services.mime.extension_detector import ExtensionMimeTypeDetector
from b2fs.services.mime.interface import MimeTypeDetectorInterface
from b2fs.services.object_storage.interface import (
    ACTION_FOLDER,
    BackendError,
    ObjectNotFound,
    ObjectStorageClientInterface,
)


class B2FileSystem(FileSystemAdapterInterface):
    """Path-based filesystem on one B2 bucket."""

    def __init__(
        self,
        client: ObjectStorageClientInterface,
        bucket_id: str,
        prefix: str = "",
        mime_detector: MimeTypeDetectorInterface | None = None,
        folder_marker: str = DEFAULT_FOLDER_MARKER,
        logger: LoggingInterface | None = None,
    ) -> None:
        self._client = client
        self._bucket_id = bucket_id
        self._prefixer = PathPrefixer(prefix)
        self._mime_detector = mime_detector or ExtensionMimeTypeDetector()
        self._folder_marker = folder_marker
        self._mapper = AttributeMapper()
        self.log = logger or LoggerFactory().create()
        self._listing = ListingEngine(
            client,
            bucket_id,
            self._prefixer,
            self._mapper,
            self.log,
            folder_marker=folder_marker,
        )
        # resolved once on first read, then never invalidated
        self._bucket_name: str | None = None
        self._bucket_name_lock = threading.Lock()

    # ── Existence ─────────────────────────────────────────────────────────

    def exists(self, path: str) -> bool:
        key = self._prefixer.strip_prefix(path)
        try:
            self._client.get_file_by_name(key, self._bucket_id)
        except ObjectNotFound:
            return False
        except BackendError as exc:
            raise self._fail(ErrorKind.EXISTENCE_CHECK_FAILED, "check existence of", path, exc) from exc
        return True

    def directory_exists(self, path: str) -> bool:
        key = self._prefixer.strip_directory_prefix(path)
        if not key:
            return True
        folder = key + DELIMITER
        try:
            for record in self._client.get_file_by_prefix(key, self._bucket_id):
                if record.key == folder and record.action == ACTION_FOLDER:
                    return True
        except ObjectNotFound:
            return False
        except BackendError as exc:
            raise self._fail(
                ErrorKind.DIRECTORY_CHECK_FAILED, "check existence of directory", path, exc
            ) from exc
        return False

    # ── Writing ───────────────────────────────────────────────────────────

    def write(self, path: str, contents: bytes) -> None:
        key = self._prefixer.strip_prefix(path)
        mime_type = self._mime_detector.detect(path, contents)
        try:
            self._client.upload_file(key, self._bucket_id, contents, content_type=mime_type)
        except BackendError as exc:
            raise self._fail(ErrorKind.WRITE_FAILED, "write", path, exc) from exc
        self.log.debug("File written", path=path, key=key, size=len(contents), mime_type=mime_type)

    def write_stream(self, path: str, stream: BinaryIO) -> None:
        key = self._prefixer.strip_prefix(path)
        try:
            self._client.upload_file(key, self._bucket_id, stream)
        except BackendError as exc:
            raise self._fail(ErrorKind.WRITE_FAILED, "write", path, exc) from exc
        self.log.debug("Stream written", path=path, key=key)

    # ── Reading ───────────────────────────────────────────────────────────

    def read(self, path: str) -> bytes:
        with self.read_stream(path) as stream:
            return stream.read()

    def read_stream(self, path: str) -> BinaryIO:
        bucket_name = self._resolve_bucket_name(path)
        key = self._prefixer.strip_prefix(path)
        try:
            return self._client.download_file_by_name(key, bucket_name)
        except BackendError as exc:
            raise self._fail(ErrorKind.READ_FAILED, "read", path, exc) from exc

    def _resolve_bucket_name(self, path: str) -> str:
        """Downloads address the bucket by name, the adapter only knows its id."""
        if self._bucket_name is not None:
            return self._bucket_name
        with self._bucket_name_lock:
            if self._bucket_name is None:
                try:
                    buckets = self._client.list_buckets(self._bucket_id)
                except BackendError as exc:
                    raise self._fail(ErrorKind.READ_FAILED, "read", path, exc) from exc
                if not buckets:
                    self.log.error("Bucket not found", bucket_id=self._bucket_id, path=path)
                    raise FileSystemError(
                        ErrorKind.READ_FAILED,
                        "read",
                        path,
                        reason=FailureReason.NOT_FOUND,
                        message=f"bucket {self._bucket_id} not found",
                    )
                self._bucket_name = buckets[0].bucket_name
                self.log.debug(
                    "Resolved bucket name",
                    bucket_id=self._bucket_id,
                    bucket_name=self._bucket_name,
                )
            return self._bucket_name

    # ── Deleting ──────────────────────────────────────────────────────────

    def delete(self, path: str) -> None:
        key = self._prefixer.strip_prefix(path)
        try:
            self._client.delete_file(key, self._bucket_id, all_revisions=True)
        except BackendError as exc:
            raise self._fail(ErrorKind.DELETE_FAILED, "delete", path, exc) from exc
        self.log.debug("File deleted", path=path, key=key)

    def delete_directory(self, path: str) -> None:
        if not self._prefixer.strip_directory_prefix(path):
            raise FileSystemError(
                ErrorKind.DELETE_DIRECTORY_FAILED,
                "delete directory",
                path,
                reason=FailureReason.INVALID_ARGUMENT,
                message="the root directory cannot be deleted",
            )
        marker = self._marker_key(path)
        try:
            self._client.delete_file(marker, self._bucket_id, all_revisions=True)
        except BackendError as exc:
            raise self._fail(ErrorKind.DELETE_DIRECTORY_FAILED, "delete directory", path, exc) from exc
        self.log.debug("Directory deleted", path=path, marker=marker)

    # ── Directories ───────────────────────────────────────────────────────

    def create_directory(self, path: str) -> None:
        if not self._prefixer.strip_directory_prefix(path):
            return
        marker = self._marker_key(path)
        try:
            self._client.upload_file(marker, self._bucket_id, b"")
        except BackendError as exc:
            raise self._fail(ErrorKind.CREATE_DIRECTORY_FAILED, "create directory", path, exc) from exc
        self.log.debug("Directory created", path=path, marker=marker)

    def _marker_key(self, path: str) -> str:
        return self._prefixer.directory_key(path) + self._folder_marker

    def list_contents(self, path: str, deep: bool) -> DirectoryListing:
        return self._listing.list(path, deep)

    # ── Copy / move ───────────────────────────────────────────────────────

    def copy(self, source: str, destination: str) -> None:
        source_key = self._prefixer.strip_prefix(source)
        dest_key = self._prefixer.strip_prefix(destination)
        try:
            self._copy_key(source_key, dest_key)
        except BackendError as exc:
            raise self._fail(ErrorKind.COPY_FAILED, "copy", source, exc, destination) from exc
        self.log.debug("File copied", source=source, destination=destination)

    def move(self, source: str, destination: str) -> None:
        """Copy to *destination*, then delete every revision at *source*.

        When both paths resolve to the same key only the source's existence
        is checked: a copy adds a revision under that key and the delete
        would remove it together with the original. Callers pairing
        ``copy`` with their own ``delete`` face the same trap.
        """
        source_key = self._prefixer.strip_prefix(source)
        dest_key = self._prefixer.strip_prefix(destination)
        try:
            if source_key == dest_key:
                self._client.get_file_by_name(source_key, self._bucket_id)
            else:
                self._copy_key(source_key, dest_key)
        except BackendError as exc:
            raise self._fail(ErrorKind.MOVE_FAILED, "move", source, exc, destination) from exc
        if source_key == dest_key:
            self.log.debug("Move onto itself skipped", source=source, destination=destination)
            return
        try:
            self._client.delete_file(source_key, self._bucket_id, all_revisions=True)
        except BackendError as exc:
            self.log.warn(
                "Move copied the file but could not delete the source",
                source=source,
                destination=destination,
            )
            raise self._fail(ErrorKind.MOVE_FAILED, "move", source, exc, destination) from exc
        self.log.debug("File moved", source=source, destination=destination)

    def _copy_key(self, source_key: str, dest_key: str) -> None:
        record = self._client.get_file_by_name(source_key, self._bucket_id)
        self._client.copy_file(record.revision_id, dest_key)

    # ── Metadata ──────────────────────────────────────────────────────────

    def set_visibility(self, path: str, visibility: str) -> None:
        raise FileSystemError(
            ErrorKind.OPERATION_UNSUPPORTED,
            "set visibility of",
            path,
            reason=FailureReason.UNSUPPORTED,
            message="B2 has no per-object visibility",
        )

    def visibility(self, path: str) -> FileAttributes:
        return self._metadata(path, "visibility")

    def mime_type(self, path: str) -> FileAttributes:
        return self._metadata(path, "mime type")

    def last_modified(self, path: str) -> FileAttributes:
        return self._metadata(path, "last modified")

    def file_size(self, path: str) -> FileAttributes:
        return self._metadata(path, "file size")

    def _metadata(self, path: str, attribute: str) -> FileAttributes:
        key = self._prefixer.strip_prefix(path)
        try:
            record = self._client.get_file_by_name(key, self._bucket_id)
        except BackendError as exc:
            raise self._fail(
                ErrorKind.METADATA_UNAVAILABLE, f"retrieve {attribute} of", path, exc
            ) from exc
        return self._mapper.to_file_attributes(record)

    # ── Health ────────────────────────────────────────────────────────────

    def health_check(self) -> bool:
        try:
            return bool(self._client.list_buckets(self._bucket_id))
        except BackendError as exc:
            self.log.warn("Health check failed", bucket_id=self._bucket_id, error=str(exc))
            return False

    # ── Internal ──────────────────────────────────────────────────────────

    def _fail(
        self,
        kind: ErrorKind,
        operation: str,
        path: str,
        exc: BackendError,
        destination: str | None = None,
    ) -> FileSystemError:
        """Build (and log) the normalized error for a failed backend call."""
        reason = FailureReason.NOT_FOUND if isinstance(exc, ObjectNotFound) else FailureReason.BACKEND
        self.log.error(
            "Filesystem operation failed",
            operation=operation,
            path=path,
            key=self._prefixer.strip_prefix(path),
            destination=destination,
            kind=kind.value,
            reason=reason.value,
            error=str(exc),
        )
        return FileSystemError(
            kind, operation, path, reason=reason, cause=exc, destination=destination
        )
