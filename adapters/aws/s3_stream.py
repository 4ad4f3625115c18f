"""
S3 stream writer.

Buffers writes in a spooled temporary file (memory first, disk past a
threshold) and uploads the whole object in one PutObject on close.
"""

import logging
import tempfile
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger("blobstore.s3")

DEFAULT_SPOOL_MAX_BYTES = 8 * 1024 * 1024


class S3StreamWriter:
    """
    Sequential writer for one S3 object.

    Nothing is visible in the bucket until close() returns. Leaving a
    ``with`` block because of an exception aborts instead: the buffer is
    discarded and nothing is uploaded.

    close() uploads on the calling thread. From a coroutine use aclose()
    (or ``async with``), which runs the upload in a worker thread under
    the store's timeout.
    """

    def __init__(
        self,
        upload: Callable[[Any], None],
        key: str,
        spool_max_bytes: int = DEFAULT_SPOOL_MAX_BYTES,
        aupload: Optional[Callable[[Any], Awaitable[None]]] = None,
    ):
        self._upload = upload
        self._aupload = aupload
        self.key = key
        self._buffer = tempfile.SpooledTemporaryFile(max_size=spool_max_bytes)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def writable(self) -> bool:
        return not self._closed

    def readable(self) -> bool:
        return False

    def write(self, data: bytes) -> int:
        if self._closed:
            raise ValueError(f"write to closed stream for {self.key}")
        return self._buffer.write(data)

    def flush(self) -> None:
        # Durability only comes from close(); nothing to push early.
        pass

    def tell(self) -> int:
        return self._buffer.tell()

    def close(self) -> None:
        """Upload the buffered bytes. Resources are released even if the upload fails."""
        if self._closed:
            return
        self._closed = True
        try:
            self._buffer.seek(0)
            self._upload(self._buffer)
            logger.debug(f"Stream upload finished for {self.key}")
        finally:
            self._buffer.close()

    async def aclose(self) -> None:
        """Upload the buffered bytes without blocking the event loop."""
        if self._aupload is None:
            raise TypeError(f"no async upload configured for {self.key}")
        if self._closed:
            return
        self._closed = True
        try:
            self._buffer.seek(0)
            await self._aupload(self._buffer)
            logger.debug(f"Stream upload finished for {self.key}")
        finally:
            self._buffer.close()

    def abort(self) -> None:
        """Discard the buffer without uploading."""
        if self._closed:
            return
        self._closed = True
        self._buffer.close()
        logger.debug(f"Stream upload aborted for {self.key}")

    def __enter__(self) -> "S3StreamWriter":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.abort()
        else:
            self.close()

    async def __aenter__(self) -> "S3StreamWriter":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.abort()
        else:
            await self.aclose()
