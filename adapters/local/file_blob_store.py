"""
Local Blob Store — filesystem.

Keys mirror 1:1 onto nested directories and files under a base path.
Intermediate directories are created on write.
"""

import logging
import os
import shutil
from pathlib import Path
from typing import BinaryIO, Optional

from blobstore.interfaces.blob_store import BlobStore
from blobstore.keys import local_path

logger = logging.getLogger("blobstore.local")


class FileBlobStore(BlobStore):
    """Filesystem-backed blob store."""

    def __init__(
        self,
        base_path: str | Path = "data/blobs",
        prefix: str = "",
        timeout: Optional[float] = None,
    ):
        super().__init__(prefix=prefix, timeout=timeout)
        self.base_path = Path(base_path)

    def _path(self, key: str) -> Path:
        return local_path(self.base_path, self.prefix, key)

    async def read(self, key: str) -> bytes:
        return await self._call("read", key, self._path(key).read_bytes)

    async def write(self, key: str, data: bytes) -> None:
        await self._call("write", key, self._write, self._path(key), data)
        logger.debug(f"Wrote {len(data)} bytes to {key}")

    async def write_if_missing(self, key: str, data: bytes) -> bool:
        created = await self._call(
            "write_if_missing", key, self._create_exclusive, self._path(key), data
        )
        if not created:
            logger.debug(f"write_if_missing: {key} already exists, skipped")
        return created

    async def remove(self, key: str) -> None:
        await self._call("remove", key, os.remove, self._path(key))
        logger.debug(f"Removed {key}")

    async def remove_folder(self, folder: str) -> None:
        self._require_folder(folder)
        target = self._path(folder)
        if self._path("") not in target.parents:
            raise ValueError(f"remove_folder: {folder!r} resolves outside the store prefix")

        removed = await self._call("remove_folder", folder, self._rmtree, target)
        if removed:
            logger.info(f"Removed folder {folder}")

    async def stream_read(self, key: str) -> BinaryIO:
        return await self._call("stream_read", key, open, self._path(key), "rb")

    async def stream_write(self, key: str) -> BinaryIO:
        return await self._call("stream_write", key, self._open_for_write, self._path(key))

    # --- Blocking helpers (run in a worker thread) ---

    @staticmethod
    def _write(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    @staticmethod
    def _create_exclusive(path: Path, data: bytes) -> bool:
        """Create the file atomically if absent. False if it already existed."""
        path.parent.mkdir(parents=True, exist_ok=True)
        try:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o644)
        except FileExistsError:
            return False

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
        except BaseException:
            # Don't leave a partial blob behind for the next caller to skip over
            path.unlink(missing_ok=True)
            raise
        return True

    @staticmethod
    def _rmtree(path: Path) -> bool:
        try:
            shutil.rmtree(path)
        except (FileNotFoundError, NotADirectoryError):
            # Missing folder, or a blob where the folder would be: nothing under it
            return False
        return True

    @staticmethod
    def _open_for_write(path: Path) -> BinaryIO:
        path.parent.mkdir(parents=True, exist_ok=True)
        return open(path, "wb")
