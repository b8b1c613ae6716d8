import pytest

from b2fs.services.filesystem.attributes import (
    AttributeMapper,
    DirectoryAttributes,
    FileAttributes,
)
from b2fs.services.object_storage.interface import ObjectRecord


@pytest.fixture
def mapper():
    return AttributeMapper()


def test_maps_full_record(mapper):
    record = ObjectRecord(
        key="docs/a.pdf",
        size=42,
        content_type="application/pdf",
        content_sha1="da39",
        revision_id="4_z1",
        file_info={"src_last_modified_millis": 1500},
    )
    attrs = mapper.to_file_attributes(record)
    assert attrs == FileAttributes(
        path="docs/a.pdf",
        file_size=42,
        visibility="public",
        last_modified=2,
        mime_type="application/pdf",
        extra_metadata={"contentHash": "da39", "revisionId": "4_z1"},
    )
    assert attrs.is_file and not attrs.is_dir


def test_missing_size_and_type_use_backend_defaults(mapper):
    attrs = mapper.to_file_attributes(ObjectRecord(key="a"))
    assert attrs.file_size == 0
    assert attrs.mime_type == "application/octet-stream"
    assert attrs.last_modified == 0


@pytest.mark.parametrize(
    "millis, expected",
    [(1500, 2), ("1500", 2), (1000, 1), (1001, 2), (999, 1), (0, 0), ("garbage", 0)],
)
def test_last_modified_rounds_up(mapper, millis, expected):
    record = ObjectRecord(key="a", file_info={"src_last_modified_millis": millis})
    assert mapper.to_file_attributes(record).last_modified == expected


def test_directory_attributes_strip_delimiter(mapper):
    attrs = mapper.to_directory_attributes("dir/sub/")
    assert attrs == DirectoryAttributes(path="dir/sub", visibility="public")
    assert attrs.is_dir and not attrs.is_file


def test_attributes_are_hashable(mapper):
    record = ObjectRecord(key="a.txt", size=1, revision_id="4_z1", file_info={"src_last_modified_millis": 1})
    attrs = mapper.to_file_attributes(record)
    assert hash(record) == hash(ObjectRecord(key="a.txt", size=1, revision_id="4_z1"))
    assert {attrs, mapper.to_file_attributes(record)} == {attrs}
    assert len({mapper.to_directory_attributes("dir/"), mapper.to_directory_attributes("dir")}) == 1
