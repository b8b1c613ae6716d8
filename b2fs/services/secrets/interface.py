from abc import ABC, abstractmethod


class SecretsInterface(ABC):
    """Source of B2 credentials (``FS_B2_KEY_ID``, ``FS_B2_APPLICATION_KEY``)
    and the ``FS_*`` adapter settings."""

    @abstractmethod
    def get(self, key: str) -> str | None: ...

    @abstractmethod
    def get_or_default(self, key: str, default: str) -> str: ...

    @abstractmethod
    def require(self, key: str) -> str:
        """Return the value for *key* or raise ``KeyError`` naming it."""
        ...
