"""
Concurrent deletion engine.

Deletes a set of object names in parallel and reports one aggregate
outcome. Every delete runs to completion; a failure never cancels its
siblings, and any failure is reported as a single FolderRemovalError.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Iterable

from blobstore.errors.models import FolderRemovalError

logger = logging.getLogger("blobstore.deletion")

DEFAULT_MAX_CONCURRENCY = 16


class ConcurrentDeleter:
    """
    Fans a list of deletes out to concurrent tasks and joins them at a barrier.

    At most ``max_concurrency`` deletes are in flight at once.
    """

    def __init__(self, max_concurrency: int = DEFAULT_MAX_CONCURRENCY):
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self.max_concurrency = max_concurrency

    async def delete_all(
        self,
        names: Iterable[str],
        delete: Callable[[str], Awaitable[None]],
        folder: str = "",
    ) -> int:
        """
        Delete every name and wait for all of them.

        Args:
            names: Object names, already enumerated
            delete: Coroutine function deleting one name
            folder: Folder being removed (for error reporting)

        Returns:
            Number of objects deleted

        Raises:
            FolderRemovalError: If any delete failed, after all have finished
        """
        names = list(names)
        if not names:
            return 0

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _guarded(name: str) -> None:
            async with semaphore:
                await delete(name)

        results = await asyncio.gather(
            *(_guarded(name) for name in names),
            return_exceptions=True,
        )

        failed: list[tuple[str, BaseException]] = []
        for name, result in zip(names, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, BaseException):
                failed.append((name, result))

        if failed:
            logger.error(
                f"Folder removal '{folder}': {len(failed)}/{len(names)} deletes failed"
            )
            raise FolderRemovalError(folder, failed, len(names))

        logger.debug(f"Folder removal '{folder}': deleted {len(names)} objects")
        return len(names)
