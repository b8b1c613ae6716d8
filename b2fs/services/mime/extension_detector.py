from __future__ import annotations

import mimetypes

from b2fs.services.mime.interface import MimeTypeDetectorInterface

EMPTY_CONTENT_TYPE = "application/x-empty"
TEXT_CONTENT_TYPE = "text/plain"
BINARY_CONTENT_TYPE = "application/octet-stream"

# Only this many leading bytes are inspected when sniffing.
_SNIFF_BYTES = 1024


class ExtensionMimeTypeDetector(MimeTypeDetectorInterface):
    """Guesses by file extension, then falls back to sniffing the content."""

    def detect(self, path: str, content: bytes) -> str:
        guessed, _ = mimetypes.guess_type(path, strict=False)
        if guessed:
            return guessed
        return self._sniff(content)

    @staticmethod
    def _sniff(content: bytes) -> str:
        if not content:
            return EMPTY_CONTENT_TYPE
        head = content[:_SNIFF_BYTES]
        if b"\x00" in head:
            return BINARY_CONTENT_TYPE
        try:
            head.decode("utf-8")
        except UnicodeDecodeError as exc:
            # a multi-byte character cut at the sniff boundary is still text
            if exc.start < len(head) - 3:
                return BINARY_CONTENT_TYPE
        return TEXT_CONTENT_TYPE
