import itertools
from unittest.mock import patch

import pytest

from b2fs.services.filesystem.attributes import (
    AttributeMapper,
    DirectoryAttributes,
    FileAttributes,
)
from b2fs.services.filesystem.errors import ErrorKind, FailureReason, FileSystemError
from b2fs.services.filesystem.listing import ListingEngine
from b2fs.services.filesystem.path_prefixer import PathPrefixer
from b2fs.services.object_storage.interface import (
    ACTION_FOLDER,
    ACTION_HIDE,
    ACTION_START,
    BackendError,
)

BUCKET_ID = "bucket-id"


def _engine(client, log, prefix="", folder_marker=".bzEmpty"):
    return ListingEngine(
        client, BUCKET_ID, PathPrefixer(prefix), AttributeMapper(), log,
        folder_marker=folder_marker,
    )


def _entries(listing):
    return [("dir" if e.is_dir else "file", e.path) for e in listing]


@pytest.fixture
def scenario(client):
    client.upload_file("a.txt", BUCKET_ID, b"a")
    client.put_record(BUCKET_ID, "dir/", action=ACTION_FOLDER)
    client.upload_file("dir/b.txt", BUCKET_ID, b"b")
    return client


@pytest.fixture
def tree(client):
    for name in ["a.txt", "dir/b.txt", "dir/sub/c.txt", "dir/sub/deeper/d.txt", "dir/z.txt", "e.txt"]:
        client.upload_file(name, BUCKET_ID, name.encode())
    return client


class TestScenario:
    def test_shallow_root(self, scenario, log):
        result = list(_engine(scenario, log).list("", deep=False))
        assert [type(e) for e in result] == [FileAttributes, DirectoryAttributes]
        assert [e.path for e in result] == ["a.txt", "dir"]

    def test_deep_root(self, scenario, log):
        result = _entries(_engine(scenario, log).list("", deep=True))
        assert result == [("file", "a.txt"), ("dir", "dir"), ("file", "dir/b.txt")]

    def test_listing_a_directory_skips_its_own_marker(self, scenario, log):
        result = _entries(_engine(scenario, log).list("dir", deep=False))
        assert result == [("file", "dir/b.txt")]


class TestDeepAndShallow:
    def test_deep_is_pre_order_depth_first(self, tree, log):
        result = _entries(_engine(tree, log).list("", deep=True))
        assert result == [
            ("file", "a.txt"),
            ("dir", "dir"),
            ("file", "dir/b.txt"),
            ("dir", "dir/sub"),
            ("file", "dir/sub/c.txt"),
            ("dir", "dir/sub/deeper"),
            ("file", "dir/sub/deeper/d.txt"),
            ("file", "dir/z.txt"),
            ("file", "e.txt"),
        ]

    def test_each_directory_appears_once(self, tree, log):
        dirs = [e.path for e in _engine(tree, log).list("", deep=True) if e.is_dir]
        assert len(dirs) == len(set(dirs))

    def test_shallow_root_files_have_no_delimiter(self, tree, log):
        files = [e.path for e in _engine(tree, log).list("", deep=False) if e.is_file]
        assert files == ["a.txt", "e.txt"]
        assert all("/" not in f for f in files)

    def test_shallow_subdirectory(self, tree, log):
        result = _entries(_engine(tree, log).list("dir", deep=False))
        assert result == [("file", "dir/b.txt"), ("dir", "dir/sub"), ("file", "dir/z.txt")]

    def test_deep_subdirectory_returns_all_descendants(self, tree, log):
        files = [e.path for e in _engine(tree, log).list("dir/sub", deep=True) if e.is_file]
        assert files == ["dir/sub/c.txt", "dir/sub/deeper/d.txt"]

    def test_sibling_with_shared_name_prefix_is_excluded(self, client, log):
        client.upload_file("dir/a.txt", BUCKET_ID, b"x")
        client.upload_file("dirty/b.txt", BUCKET_ID, b"x")
        client.upload_file("dir.txt", BUCKET_ID, b"x")
        result = _entries(_engine(client, log).list("dir", deep=True))
        assert result == [("file", "dir/a.txt")]

    def test_empty_directory(self, client, log):
        assert list(_engine(client, log).list("nothing", deep=True)) == []

    def test_path_with_root_prefix(self, tree, log):
        engine = _engine(tree, log, prefix="media")
        assert _entries(engine.list("media/dir", deep=False)) == _entries(engine.list("dir", deep=False))


class TestClassification:
    def test_other_actions_are_ignored(self, client, log):
        client.upload_file("kept.txt", BUCKET_ID, b"x")
        client.upload_file("gone.txt", BUCKET_ID, b"x")
        client.put_record(BUCKET_ID, "gone.txt", action=ACTION_HIDE)
        client.put_record(BUCKET_ID, "partial.bin", action=ACTION_START)
        assert _entries(_engine(client, log).list("", deep=True)) == [("file", "kept.txt")]

    def test_folder_marker_files_are_hidden(self, client, log):
        client.upload_file("photos/.bzEmpty", BUCKET_ID, b"")
        client.upload_file("photos/cat.jpg", BUCKET_ID, b"x")
        result = _entries(_engine(client, log).list("", deep=True))
        assert result == [("dir", "photos"), ("file", "photos/cat.jpg")]

    def test_trailing_slash_markers_are_hidden(self, client, log):
        client.upload_file("photos/", BUCKET_ID, b"")
        result = _entries(_engine(client, log, folder_marker="").list("photos", deep=False))
        assert result == []

    def test_is_marker(self, client, log):
        engine = _engine(client, log)
        assert engine.is_marker("dir/")
        assert engine.is_marker("dir/.bzEmpty")
        assert engine.is_marker(".bzEmpty")
        assert not engine.is_marker("dir/x.bzEmpty")
        assert not _engine(client, log, folder_marker="").is_marker("dir/.bzEmpty")


class TestMatcher:
    @pytest.mark.parametrize(
        "path, deep, key, matches",
        [
            ("", True, "a/b/c.txt", True),
            ("", False, "a.txt", True),
            ("", False, "a/b.txt", False),
            ("dir", True, "dir/a/b.txt", True),
            ("dir", True, "dir/", False),
            ("dir", True, "dirty/a.txt", False),
            ("dir", False, "dir/a.txt", True),
            ("dir", False, "dir/a/b.txt", False),
            ("d.r", False, "dxr/a.txt", False),
        ],
    )
    def test_matcher(self, client, log, path, deep, key, matches):
        pattern = _engine(client, log).matcher(path, deep)
        assert bool(pattern.fullmatch(key)) is matches


class TestPagination:
    def test_walks_every_page(self, client, log):
        for i in range(250):
            client.upload_file(f"f{i:03d}.txt", BUCKET_ID, b"x")
        result = list(_engine(client, log).list("", deep=False))
        assert len(result) == 250
        assert [cursor for _, _, cursor in client.list_calls] == [None, "f100.txt", "f200.txt"]

    def test_early_termination_fetches_no_further_pages(self, client, log):
        for i in range(250):
            client.upload_file(f"f{i:03d}.txt", BUCKET_ID, b"x")
        first = list(itertools.islice(_engine(client, log).list("", deep=False), 5))
        assert len(first) == 5
        assert len(client.list_calls) == 1

    def test_listing_is_lazy(self, tree, log):
        listing = _engine(tree, log).list("", deep=True)
        assert tree.list_calls == []
        next(iter(listing))
        assert len(tree.list_calls) == 1

    def test_listing_is_restartable(self, tree, log):
        listing = _engine(tree, log).list("", deep=True)
        assert _entries(listing) == _entries(listing)

    def test_page_fetches_are_logged(self, scenario, log):
        list(_engine(scenario, log).list("", deep=True))
        pages = [e for e in log.at_level("DEBUG") if e.msg == "Fetched listing page"]
        assert [p.ctx["prefix"] for p in pages] == ["", "dir/"]


class TestErrors:
    def test_non_bool_deep_is_invalid_argument(self, client, log):
        with pytest.raises(FileSystemError) as exc_info:
            _engine(client, log).list("dir", deep="yes")
        assert exc_info.value.kind is ErrorKind.INVALID_ARGUMENT
        assert exc_info.value.reason is FailureReason.INVALID_ARGUMENT

    def test_backend_failure_surfaces_as_list_failed(self, client, log):
        listing = _engine(client, log).list("dir", deep=True)
        with patch.object(client, "list_filenames", side_effect=BackendError("service unavailable")):
            with pytest.raises(FileSystemError) as exc_info:
                list(listing)
        err = exc_info.value
        assert err.kind is ErrorKind.LIST_FAILED
        assert err.path == "dir"
        assert isinstance(err.__cause__, BackendError)
        assert log.at_level("ERROR")[0].msg == "Listing page fetch failed"
