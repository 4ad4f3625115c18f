"""
ErrorHandler — classifies raw medium errors and wraps them.

Usage:
    from blobstore.errors.handler import ErrorHandler

    errors = ErrorHandler()

    try:
        data = path.read_bytes()
    except OSError as e:
        raise errors.wrap(e, "read", key) from e
"""

import logging
from typing import Optional

from botocore.exceptions import ClientError

from blobstore.errors.catalog import DEFAULT_KIND, ERROR_PATTERNS, OS_ERROR_KINDS
from blobstore.errors.models import (
    BlobNotFound,
    BlobOperationCancelled,
    BlobStoreError,
    ErrorKind,
    MediumError,
)

logger = logging.getLogger("blobstore.errors")


def error_code(error: BaseException) -> Optional[str]:
    """Extract the medium's error code from a botocore ClientError."""
    if not isinstance(error, ClientError):
        return None
    code = error.response.get("Error", {}).get("Code")
    if code:
        return str(code)
    status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    return str(status) if status else None


class ErrorHandler:
    """Matches medium errors against the catalog and wraps them in the storage taxonomy."""

    def classify(self, error: BaseException) -> ErrorKind:
        """Resolve a raw error to an ErrorKind. First catalog match wins."""
        if isinstance(error, BlobStoreError):
            return error.kind

        code = error_code(error)
        if code is not None:
            for pattern, kind in ERROR_PATTERNS:
                if pattern.search(code):
                    return kind
            return DEFAULT_KIND

        for exc_type, kind in OS_ERROR_KINDS:
            if isinstance(error, exc_type):
                return kind

        return DEFAULT_KIND

    def wrap(self, error: BaseException, operation: str, key: str = "") -> BlobStoreError:
        """Wrap an error with the operation and key that produced it.

        Args:
            error: The caught exception.
            operation: Storage operation name (e.g. "read", "remove_folder").
            key: The caller's key or folder.

        Returns:
            A BlobStoreError for the caller to raise. Errors that are already
            BlobStoreErrors are returned unchanged.
        """
        if isinstance(error, BlobStoreError):
            return error

        kind = self.classify(error)
        detail = str(error) or type(error).__name__

        if kind == ErrorKind.NOT_FOUND:
            wrapped: BlobStoreError = BlobNotFound(
                f"{operation}: no blob at '{key}'", operation, key, error
            )
        else:
            wrapped = MediumError(
                f"{operation}: '{key}' failed: {detail}", operation, key, error
            )

        self._log_error(wrapped, kind)
        return wrapped

    def cancelled(
        self, error: BaseException, operation: str, key: str = ""
    ) -> BlobOperationCancelled:
        """Wrap an expired deadline. The medium call was abandoned, not answered."""
        wrapped = BlobOperationCancelled(
            f"{operation}: '{key}' cancelled: deadline expired", operation, key, error
        )
        self._log_error(wrapped, ErrorKind.CANCELLED)
        return wrapped

    def _log_error(self, wrapped: BlobStoreError, kind: ErrorKind) -> None:
        """Log the wrapped error with full details."""
        if kind == ErrorKind.NOT_FOUND:
            logger.debug(f"[{wrapped.operation}] NOT_FOUND: {wrapped.key}")
        elif kind == ErrorKind.CANCELLED:
            logger.warning(f"[{wrapped.operation}] CANCELLED: {wrapped.original_error!r}")
        else:
            logger.error(f"[{wrapped.operation}] {kind.name}: {wrapped.original_error!r}")
