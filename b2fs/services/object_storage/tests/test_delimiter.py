from b2fs.services.object_storage.delimiter import folder_of, folder_record, skip_past
from b2fs.services.object_storage.interface import ACTION_FOLDER


def test_folder_of_nested_key():
    assert folder_of("a/b/c.txt", "a/", "/") == "a/b/"
    assert folder_of("a/b/c.txt", "", "/") == "a/"


def test_folder_of_direct_child_is_none():
    assert folder_of("a/c.txt", "a/", "/") is None
    assert folder_of("a/b/c.txt", "", None) is None


def test_skip_past_sorts_after_folder_contents():
    after = skip_past("dir/", "/")
    assert after == "dir0"
    assert "dir/zzz/\uffff" < after
    assert "dir-other" < "dir/" < after


def test_folder_record_shape():
    record = folder_record("dir/")
    assert record.key == "dir/"
    assert record.action == ACTION_FOLDER
    assert record.size == 0
