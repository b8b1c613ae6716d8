"""Backblaze B2 client implementation on top of ``b2sdk``."""

from __future__ import annotations

import contextlib
import tempfile
from typing import Any, BinaryIO, Iterator

from b2fs.services.object_storage.delimiter import folder_of, folder_record, skip_past
from b2fs.services.object_storage.interface import (
    ACTION_UPLOAD,
    BackendError,
    BucketRecord,
    ListPage,
    ObjectNotFound,
    ObjectRecord,
    ObjectStorageClientInterface,
)
from b2fs.services.secrets.interface import SecretsInterface

# Downloads larger than this spill from memory to a temporary file.
_SPOOL_MAX_BYTES = 8 * 1024 * 1024


def record_from_dict(data: dict[str, Any]) -> ObjectRecord:
    """Map a raw ``b2_list_file_names`` / ``b2_copy_file`` entry."""
    return ObjectRecord(
        key=data["fileName"],
        action=data.get("action", ACTION_UPLOAD),
        size=data.get("contentLength"),
        content_type=data.get("contentType"),
        content_sha1=data.get("contentSha1"),
        revision_id=data.get("fileId"),
        file_info=dict(data.get("fileInfo") or {}),
        upload_timestamp=data.get("uploadTimestamp") or 0,
    )


def record_from_version(version: Any) -> ObjectRecord:
    """Map a b2sdk ``FileVersion`` / ``DownloadVersion``."""
    return ObjectRecord(
        key=version.file_name,
        action=getattr(version, "action", None) or ACTION_UPLOAD,
        size=version.size,
        content_type=version.content_type,
        content_sha1=version.content_sha1,
        revision_id=version.id_,
        file_info=dict(version.file_info or {}),
        upload_timestamp=version.upload_timestamp or 0,
    )


def group_page(
    entries: list[ObjectRecord], prefix: str, delimiter: str | None
) -> tuple[list[ObjectRecord], str | None]:
    """Collapse a raw page into B2 delimiter form.

    Returns the grouped records and the folder the page ended inside, if any,
    so the caller can continue past it instead of re-emitting it.
    """
    grouped: list[ObjectRecord] = []
    open_folder: str | None = None
    for entry in entries:
        if open_folder is not None and entry.key.startswith(open_folder):
            continue
        folder = folder_of(entry.key, prefix, delimiter)
        if folder is None:
            grouped.append(entry)
            open_folder = None
        else:
            grouped.append(folder_record(folder))
            open_folder = folder
    return grouped, open_folder


class B2ObjectStorageClient(ObjectStorageClientInterface):
    """Object storage backed by Backblaze B2's native API.

    Config (via secrets):
        FS_B2_KEY_ID          - Application key id (required)
        FS_B2_APPLICATION_KEY - Application key (required)
        FS_B2_REALM           - Realm (default: production)

    Retries, timeouts and re-authorization are left to b2sdk's own
    session policy.
    """

    def __init__(self, secrets: SecretsInterface) -> None:
        from b2sdk.v2 import B2Api, InMemoryAccountInfo

        key_id = secrets.require("FS_B2_KEY_ID")
        app_key = secrets.require("FS_B2_APPLICATION_KEY")
        realm = secrets.get_or_default("FS_B2_REALM", "production")

        self._api = B2Api(InMemoryAccountInfo())
        with self._translate_errors("authorize_account"):
            self._api.authorize_account(realm, key_id, app_key)

    @classmethod
    def from_secrets(cls, secrets: SecretsInterface) -> B2ObjectStorageClient:
        return cls(secrets)

    def get_file_by_name(self, key: str, bucket_id: str) -> ObjectRecord:
        with self._translate_errors(key):
            version = self._api.get_bucket_by_id(bucket_id).get_file_info_by_name(key)
            return record_from_version(version)

    def list_filenames(
        self,
        bucket_id: str,
        page_size: int,
        start_path: str,
        delimiter: str | None,
        cursor: str | None = None,
    ) -> ListPage:
        with self._translate_errors(start_path):
            response = self._api.session.list_file_names(
                bucket_id, cursor, page_size, start_path or None
            )
        entries = [record_from_dict(f) for f in response.get("files", [])]
        records, open_folder = group_page(entries, start_path, delimiter)

        next_cursor = response.get("nextFileName")
        if next_cursor is not None and open_folder is not None and delimiter:
            next_cursor = max(next_cursor, skip_past(open_folder, delimiter))
        return ListPage(records, next_cursor=next_cursor)

    def upload_file(
        self,
        key: str,
        bucket_id: str,
        content: bytes | BinaryIO,
        content_type: str | None = None,
        file_info: dict[str, Any] | None = None,
    ) -> ObjectRecord:
        from b2sdk.v2 import AUTO_CONTENT_TYPE

        with self._translate_errors(key):
            bucket = self._api.get_bucket_by_id(bucket_id)
            if isinstance(content, bytes):
                version = bucket.upload_bytes(
                    content, key,
                    content_type=content_type or AUTO_CONTENT_TYPE,
                    file_info=file_info,
                )
            else:
                version = bucket.upload_unbound_stream(
                    content, key,
                    content_type=content_type or AUTO_CONTENT_TYPE,
                    file_info=file_info,
                )
            return record_from_version(version)

    def download_file_by_name(self, key: str, bucket_name: str) -> BinaryIO:
        spool = tempfile.SpooledTemporaryFile(max_size=_SPOOL_MAX_BYTES)
        try:
            with self._translate_errors(key):
                bucket = self._api.get_bucket_by_name(bucket_name)
                bucket.download_file_by_name(key).save(spool)
        except BaseException:
            spool.close()
            raise
        spool.seek(0)
        return spool  # type: ignore[return-value]

    def delete_file(
        self,
        key: str,
        bucket_id: str,
        revision_id: str | None = None,
        all_revisions: bool = False,
    ) -> None:
        with self._translate_errors(key):
            if revision_id is not None and not all_revisions:
                self._api.delete_file_version(revision_id, key)
                return
            bucket = self._api.get_bucket_by_id(bucket_id)
            versions = [
                v for v in bucket.list_file_versions(key) if v.file_name == key
            ]
            if not versions:
                raise ObjectNotFound(f"File not present: {key}")
            for version in versions if all_revisions else versions[:1]:
                self._api.delete_file_version(version.id_, key)

    def copy_file(self, revision_id: str, dest_key: str) -> ObjectRecord:
        with self._translate_errors(dest_key):
            response = self._api.session.copy_file(revision_id, dest_key)
            return record_from_dict(response)

    def list_buckets(self, bucket_id: str) -> list[BucketRecord]:
        with self._translate_errors(bucket_id):
            buckets = self._api.list_buckets(bucket_id=bucket_id)
            return [BucketRecord(b.id_, b.name) for b in buckets]

    @staticmethod
    @contextlib.contextmanager
    def _translate_errors(subject: str) -> Iterator[None]:
        """Re-raise b2sdk exceptions as ObjectNotFound / BackendError."""
        from b2sdk.v2.exception import B2Error, FileNotPresent, NonExistentBucket

        try:
            yield
        except BackendError:
            raise
        except (FileNotPresent, NonExistentBucket) as exc:
            raise ObjectNotFound(f"Not found: {subject}") from exc
        except B2Error as exc:
            raise BackendError(f"B2 request failed for {subject}: {exc}") from exc
