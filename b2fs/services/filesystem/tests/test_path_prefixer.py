from b2fs.services.filesystem.path_prefixer import PathPrefixer


def test_empty_prefix_is_identity():
    p = PathPrefixer()
    assert p.strip_prefix("a/b.txt") == "a/b.txt"
    assert p.strip_prefix("/a/b.txt") == "a/b.txt"


def test_strips_configured_prefix():
    p = PathPrefixer("media/")
    assert p.prefix == "media"
    assert p.strip_prefix("media/a/b.txt") == "a/b.txt"
    assert p.strip_prefix("/media/a/b.txt") == "a/b.txt"
    assert p.strip_prefix("media") == ""


def test_paths_without_prefix_pass_through():
    p = PathPrefixer("media")
    assert p.strip_prefix("a/b.txt") == "a/b.txt"
    assert p.strip_prefix("mediafile.txt") == "mediafile.txt"


def test_strip_directory_prefix_drops_trailing_delimiter():
    p = PathPrefixer("media")
    assert p.strip_directory_prefix("media/dir/") == "dir"
    assert p.strip_directory_prefix("/") == ""


def test_directory_key():
    p = PathPrefixer()
    assert p.directory_key("") == ""
    assert p.directory_key("dir") == "dir/"
    assert p.directory_key("/dir/sub/") == "dir/sub/"
