from __future__ import annotations

DELIMITER = "/"


class PathPrefixer:
    """Translates logical paths to bucket keys around an optional root prefix.

    Logical paths may or may not carry the configured prefix; both map to the
    same key. An empty prefix only drops the leading delimiter.
    """

    def __init__(self, prefix: str = "", delimiter: str = DELIMITER) -> None:
        self._delimiter = delimiter
        self._prefix = prefix.strip(delimiter)

    @property
    def prefix(self) -> str:
        return self._prefix

    def strip_prefix(self, path: str) -> str:
        key = path.lstrip(self._delimiter)
        if not self._prefix:
            return key
        if key == self._prefix:
            return ""
        if key.startswith(self._prefix + self._delimiter):
            return key[len(self._prefix):].lstrip(self._delimiter)
        return key

    def strip_directory_prefix(self, path: str) -> str:
        return self.strip_prefix(path).rstrip(self._delimiter)

    def directory_key(self, path: str) -> str:
        """Backend listing prefix for a directory: ``"dir/"``, or ``""`` for root."""
        key = self.strip_directory_prefix(path)
        return key + self._delimiter if key else ""
