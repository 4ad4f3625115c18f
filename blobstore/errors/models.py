"""
Blob store error models.

Every failure that leaves the storage layer is a BlobStoreError subclass,
carrying the operation and key that failed plus the raw medium error.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """How a raw medium error is resolved by the storage layer."""

    NOT_FOUND = "not_found"            # Key/object absent, surfaced as BlobNotFound
    ALREADY_EXISTS = "already_exists"  # Exclusive create lost: no-op, never raised
    MEDIUM = "medium"                  # Any other I/O, permission or network failure
    CANCELLED = "cancelled"            # Deadline expired before the medium answered


class BlobStoreError(Exception):
    """Base class for all storage errors."""

    kind: ErrorKind = ErrorKind.MEDIUM

    def __init__(
        self,
        message: str,
        operation: str = "",
        key: str = "",
        original_error: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.key = key
        self.original_error = original_error

    def to_dict(self) -> dict:
        return {
            "type": "error",
            "kind": self.kind.value,
            "message": self.message,
            "operation": self.operation,
            "key": self.key,
            "original_error": str(self.original_error) if self.original_error else "",
        }


class BlobNotFound(BlobStoreError):
    """Raised when a requested blob doesn't exist."""

    kind = ErrorKind.NOT_FOUND


class MediumError(BlobStoreError):
    """Raised when the backing medium fails for any reason other than a missing key."""

    kind = ErrorKind.MEDIUM


class BlobOperationCancelled(MediumError):
    """Raised when an operation's deadline expires and the medium call is abandoned."""

    kind = ErrorKind.CANCELLED


class FolderRemovalError(MediumError):
    """
    Raised when one or more deletes of a folder removal failed.

    Objects deleted before or alongside the failures stay deleted.
    """

    def __init__(
        self,
        folder: str,
        failed: list[tuple[str, BaseException]],
        total: int,
    ):
        names = ", ".join(name for name, _ in failed[:3])
        more = f" (+{len(failed) - 3} more)" if len(failed) > 3 else ""
        super().__init__(
            f"{len(failed)} of {total} deletes failed under '{folder}': {names}{more}",
            operation="remove_folder",
            key=folder,
            original_error=failed[0][1] if failed else None,
        )
        self.folder = folder
        self.failed = failed
        self.total = total


class ConfigurationError(BlobStoreError):
    """Raised when store configuration is invalid or missing."""
