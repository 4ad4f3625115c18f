"""
Blob Store Interface

Medium-agnostic abstraction for named byte blobs.
Implementations: FileBlobStore (local filesystem), S3BlobStore (AWS S3), etc.

All application code depends on this contract only. A store is built once,
is read-only after construction, and is safe for concurrent use by any
number of tasks.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Callable, Optional, TypeVar

from blobstore.errors.handler import ErrorHandler
from blobstore.keys import SEPARATOR, join_key

T = TypeVar("T")


class BlobStore(ABC):
    """
    Abstract base class for blob storage.

    Keys are "/"-separated and joined under the store's prefix before they
    reach the medium. Each blocking medium call runs in a worker thread so
    operations from one event loop overlap; if ``timeout`` is set, a call
    that outlives it is abandoned and BlobOperationCancelled is raised.
    """

    def __init__(self, prefix: str = "", timeout: Optional[float] = None):
        self.prefix = prefix or ""
        self.timeout = timeout
        self.errors = ErrorHandler()

    @abstractmethod
    async def read(self, key: str) -> bytes:
        """
        Retrieve a blob.

        Args:
            key: Blob key (e.g., "users/123/avatar.png")

        Returns:
            The full blob content

        Raises:
            BlobNotFound: If no blob exists at the key
            MediumError: On any other failure
        """
        ...

    @abstractmethod
    async def write(self, key: str, data: bytes) -> None:
        """
        Create or overwrite a blob.

        Any intermediate structure the key implies is created first.
        When this returns, a subsequent read observes ``data``.
        """
        ...

    @abstractmethod
    async def write_if_missing(self, key: str, data: bytes) -> bool:
        """
        Create a blob only if the key holds nothing yet.

        Creation is a single atomic medium operation. If the key already
        exists, or a concurrent caller wins the race, the call is a
        no-op and still succeeds.

        Returns:
            True if this call created the blob, False on the no-op branch

        Raises:
            MediumError: On any failure other than the key already existing
        """
        ...

    @abstractmethod
    async def remove(self, key: str) -> None:
        """
        Delete a blob.

        Raises:
            BlobNotFound: If no blob exists at the key
        """
        ...

    @abstractmethod
    async def remove_folder(self, folder: str) -> None:
        """
        Delete every blob whose key starts with ``folder + "/"``.

        Succeeds as a no-op if nothing matches. Blobs outside the folder
        are never touched.

        Raises:
            ValueError: If folder is empty, or normalizes to "." or above it
            MediumError: If the folder could not be fully removed
        """
        ...

    @abstractmethod
    async def stream_read(self, key: str) -> BinaryIO:
        """
        Open a blob for sequential reading.

        The caller owns the handle and must close it; closing releases the
        underlying file descriptor or connection even if it was not drained.

        Raises:
            BlobNotFound: If no blob exists at the key
        """
        ...

    @abstractmethod
    async def stream_write(self, key: str) -> BinaryIO:
        """
        Open a blob for sequential writing.

        The blob is only guaranteed durable and visible once the handle is
        closed. The caller must close it on every exit path.
        """
        ...

    async def read_json(self, key: str) -> Any:
        """Convenience: retrieve and parse JSON."""
        return json.loads(await self.read(key))

    async def write_json(self, key: str, data: Any) -> None:
        """Convenience: serialize to JSON and store."""
        await self.write(key, json.dumps(data).encode("utf-8"))

    async def _call(
        self,
        operation: str,
        key: str,
        fn: Callable[..., T],
        *args: Any,
    ) -> T:
        """Run a blocking medium call in a worker thread and wrap its errors."""

        def _run() -> T:
            # Medium errors are wrapped here, so a TimeoutError leaving
            # wait_for can only be the deadline
            try:
                return fn(*args)
            except Exception as e:
                raise self.errors.wrap(e, operation, key) from e

        try:
            return await asyncio.wait_for(asyncio.to_thread(_run), self.timeout)
        except TimeoutError as e:
            raise self.errors.cancelled(e, operation, key) from e

    @staticmethod
    def _require_folder(folder: str) -> None:
        """Reject folders that normalize to the whole namespace or climb out of it."""
        normalized = join_key("", folder).lstrip(SEPARATOR)
        if not normalized or normalized == ".." or normalized.startswith("../"):
            raise ValueError(f"remove_folder needs a folder inside the store, got {folder!r}")
