"""Normalized error taxonomy for filesystem adapter operations.

Every backend failure leaves the adapter as a single ``FileSystemError``
tagged with *what* failed (``ErrorKind``) and *why* (``FailureReason``),
plus the operation name, the logical path and the original cause.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    EXISTENCE_CHECK_FAILED = "existence_check_failed"
    DIRECTORY_CHECK_FAILED = "directory_check_failed"
    WRITE_FAILED = "write_failed"
    READ_FAILED = "read_failed"
    DELETE_FAILED = "delete_failed"
    DELETE_DIRECTORY_FAILED = "delete_directory_failed"
    CREATE_DIRECTORY_FAILED = "create_directory_failed"
    COPY_FAILED = "copy_failed"
    MOVE_FAILED = "move_failed"
    OPERATION_UNSUPPORTED = "operation_unsupported"
    METADATA_UNAVAILABLE = "metadata_unavailable"
    LIST_FAILED = "list_failed"
    INVALID_ARGUMENT = "invalid_argument"


class FailureReason(str, Enum):
    NOT_FOUND = "not_found"
    BACKEND = "backend"
    UNSUPPORTED = "unsupported"
    INVALID_ARGUMENT = "invalid_argument"


class FileSystemError(Exception):
    """A failed adapter operation.

    ``cause`` is also chained as ``__cause__`` by the raising site
    (``raise ... from exc``).
    """

    def __init__(
        self,
        kind: ErrorKind,
        operation: str,
        path: str,
        reason: FailureReason = FailureReason.BACKEND,
        cause: BaseException | None = None,
        destination: str | None = None,
        message: str = "",
    ) -> None:
        self.kind = kind
        self.operation = operation
        self.path = path
        self.reason = reason
        self.cause = cause
        self.destination = destination
        super().__init__(self._describe(message))

    @property
    def not_found(self) -> bool:
        return self.reason is FailureReason.NOT_FOUND

    def _describe(self, message: str) -> str:
        target = f"'{self.path}'"
        if self.destination is not None:
            target += f" to '{self.destination}'"
        text = f"Unable to {self.operation} {target} ({self.kind.value}, {self.reason.value})"
        detail = message or (str(self.cause) if self.cause is not None else "")
        return f"{text}: {detail}" if detail else text
