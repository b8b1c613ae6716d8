from abc import ABC, abstractmethod


class MimeTypeDetectorInterface(ABC):
    """Detects a content type from a path and the bytes about to be written."""

    @abstractmethod
    def detect(self, path: str, content: bytes) -> str: ...
