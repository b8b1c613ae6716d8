from __future__ import annotations

import hashlib
import io
import time
import uuid
from typing import Any, BinaryIO

from b2fs.services.object_storage.delimiter import folder_of, folder_record, skip_past
from b2fs.services.object_storage.interface import (
    ACTION_UPLOAD,
    DEFAULT_CONTENT_TYPE,
    BucketRecord,
    ListPage,
    ObjectNotFound,
    ObjectRecord,
    ObjectStorageClientInterface,
)
from b2fs.services.secrets.interface import SecretsInterface


class MemoryObjectStorageClient(ObjectStorageClientInterface):
    """In-memory B2 stand-in for unit testing.

    Keeps every revision of every name (newest last), so hide/folder/start
    records can be planted next to real uploads. Listing returns the newest
    revision per name and applies delimiter grouping the way B2 does.
    """

    def __init__(self, buckets: dict[str, str] | None = None) -> None:
        # bucket_id -> bucket_name
        self._buckets: dict[str, str] = dict(buckets or {"bucket-id": "bucket-name"})
        # bucket_id -> key -> revisions (oldest first)
        self._objects: dict[str, dict[str, list[ObjectRecord]]] = {
            bucket_id: {} for bucket_id in self._buckets
        }
        self._content: dict[str, bytes] = {}
        # revision_id -> bucket_id
        self._revision_bucket: dict[str, str] = {}
        # (bucket_id, start_path, cursor) per list_filenames call
        self.list_calls: list[tuple[str, str, str | None]] = []
        self.list_bucket_calls = 0

    @classmethod
    def from_secrets(cls, secrets: SecretsInterface) -> MemoryObjectStorageClient:
        bucket_id = secrets.get_or_default("FS_B2_BUCKET_ID", "bucket-id")
        bucket_name = secrets.get_or_default("FS_B2_BUCKET_NAME", "bucket-name")
        return cls(buckets={bucket_id: bucket_name})

    # ── Test helpers ──────────────────────────────────────────────────────

    def put_record(
        self,
        bucket_id: str,
        key: str,
        action: str = ACTION_UPLOAD,
        content: bytes = b"",
        content_type: str | None = None,
        file_info: dict[str, Any] | None = None,
    ) -> ObjectRecord:
        """Store a raw revision with an arbitrary action."""
        revisions = self._bucket_objects(bucket_id).setdefault(key, [])
        record = ObjectRecord(
            key=key,
            action=action,
            size=len(content),
            content_type=content_type or DEFAULT_CONTENT_TYPE,
            content_sha1=hashlib.sha1(content).hexdigest(),
            revision_id=f"4_z{uuid.uuid4().hex}",
            file_info=dict(file_info or {}),
            upload_timestamp=int(time.time() * 1000),
        )
        revisions.append(record)
        self._content[record.revision_id] = content
        self._revision_bucket[record.revision_id] = bucket_id
        return record

    def revisions(self, bucket_id: str, key: str) -> list[ObjectRecord]:
        return list(self._bucket_objects(bucket_id).get(key, []))

    # ── ObjectStorageClientInterface ──────────────────────────────────────

    def get_file_by_name(self, key: str, bucket_id: str) -> ObjectRecord:
        revisions = self._bucket_objects(bucket_id).get(key)
        if not revisions or revisions[-1].action != ACTION_UPLOAD:
            raise ObjectNotFound(f"File not present: {key}")
        return revisions[-1]

    def list_filenames(
        self,
        bucket_id: str,
        page_size: int,
        start_path: str,
        delimiter: str | None,
        cursor: str | None = None,
    ) -> ListPage:
        self.list_calls.append((bucket_id, start_path, cursor))
        objects = self._bucket_objects(bucket_id)
        names = sorted(
            k for k in objects
            if k.startswith(start_path) and (cursor is None or k >= cursor)
        )

        records: list[ObjectRecord] = []
        skip_until: str | None = None
        for name in names:
            if skip_until is not None and name < skip_until:
                continue
            if len(records) == page_size:
                return ListPage(records, next_cursor=name)
            folder = folder_of(name, start_path, delimiter)
            if folder is not None:
                records.append(folder_record(folder))
                skip_until = skip_past(folder, delimiter or "")
            else:
                records.append(objects[name][-1])
        return ListPage(records, next_cursor=None)

    def upload_file(
        self,
        key: str,
        bucket_id: str,
        content: bytes | BinaryIO,
        content_type: str | None = None,
        file_info: dict[str, Any] | None = None,
    ) -> ObjectRecord:
        data = content if isinstance(content, bytes) else content.read()
        return self.put_record(
            bucket_id, key, ACTION_UPLOAD, data,
            content_type=content_type, file_info=file_info,
        )

    def download_file_by_name(self, key: str, bucket_name: str) -> BinaryIO:
        bucket_id = self._bucket_id_for_name(bucket_name)
        record = self.get_file_by_name(key, bucket_id)
        return io.BytesIO(self._content[record.revision_id])

    def delete_file(
        self,
        key: str,
        bucket_id: str,
        revision_id: str | None = None,
        all_revisions: bool = False,
    ) -> None:
        objects = self._bucket_objects(bucket_id)
        revisions = objects.get(key)
        if not revisions:
            raise ObjectNotFound(f"File not present: {key}")
        if all_revisions:
            doomed = list(revisions)
        elif revision_id is not None:
            doomed = [r for r in revisions if r.revision_id == revision_id]
            if not doomed:
                raise ObjectNotFound(f"File version not present: {revision_id}")
        else:
            doomed = [revisions[-1]]
        for record in doomed:
            revisions.remove(record)
            self._content.pop(record.revision_id, None)
            self._revision_bucket.pop(record.revision_id, None)
        if not revisions:
            del objects[key]

    def copy_file(self, revision_id: str, dest_key: str) -> ObjectRecord:
        bucket_id = self._revision_bucket.get(revision_id)
        if bucket_id is None:
            raise ObjectNotFound(f"File version not present: {revision_id}")
        source = next(
            r for revs in self._objects[bucket_id].values() for r in revs
            if r.revision_id == revision_id
        )
        return self.put_record(
            bucket_id, dest_key, ACTION_UPLOAD, self._content[revision_id],
            content_type=source.content_type, file_info=source.file_info,
        )

    def list_buckets(self, bucket_id: str) -> list[BucketRecord]:
        self.list_bucket_calls += 1
        name = self._buckets.get(bucket_id)
        return [BucketRecord(bucket_id, name)] if name is not None else []

    # ── Internal ──────────────────────────────────────────────────────────

    def _bucket_objects(self, bucket_id: str) -> dict[str, list[ObjectRecord]]:
        objects = self._objects.get(bucket_id)
        if objects is None:
            raise ObjectNotFound(f"Bucket not found: {bucket_id}")
        return objects

    def _bucket_id_for_name(self, bucket_name: str) -> str:
        for bucket_id, name in self._buckets.items():
            if name == bucket_name:
                return bucket_id
        raise ObjectNotFound(f"Bucket not found: {bucket_name}")
