"""
AWS Blob Store — S3.

Objects stored at: {bucket}/{prefix}/{key}
Works against any S3-compatible endpoint (MinIO, LocalStack) via endpoint_url.
Credentials are resolved by boto3 (env, profile, instance/task role).
"""

import logging
import os
from typing import Any, BinaryIO, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

from adapters.aws.s3_stream import DEFAULT_SPOOL_MAX_BYTES, S3StreamWriter
from blobstore.deletion import DEFAULT_MAX_CONCURRENCY, ConcurrentDeleter
from blobstore.errors.models import ConfigurationError, ErrorKind
from blobstore.interfaces.blob_store import BlobStore
from blobstore.keys import folder_prefix, object_name

logger = logging.getLogger("blobstore.s3")


class S3BlobStore(BlobStore):
    """S3-backed blob store."""

    def __init__(
        self,
        bucket: str,
        prefix: str = "",
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        client: Any = None,
        max_delete_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        timeout: Optional[float] = None,
        spool_max_bytes: int = DEFAULT_SPOOL_MAX_BYTES,
    ):
        super().__init__(prefix=prefix, timeout=timeout)
        bucket = (bucket or "").strip()
        if not bucket:
            raise ConfigurationError("An S3 bucket is required for the S3 blob store")

        self.bucket = bucket
        self.spool_max_bytes = spool_max_bytes
        self.deleter = ConcurrentDeleter(max_delete_concurrency)

        if client is None:
            # One pooled connection per concurrent delete
            cfg = Config(
                retries={"max_attempts": 3, "mode": "standard"},
                max_pool_connections=max_delete_concurrency,
            )
            client = boto3.client(
                "s3", region_name=region, endpoint_url=endpoint_url, config=cfg
            )
        self.client = client

    @classmethod
    def from_env(cls) -> "S3BlobStore":
        return cls(
            bucket=os.getenv("BLOBSTORE_S3_BUCKET", ""),
            prefix=os.getenv("BLOBSTORE_PREFIX", ""),
            region=os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION") or None,
            endpoint_url=os.getenv("BLOBSTORE_S3_ENDPOINT_URL") or None,
        )

    def _name(self, key: str) -> str:
        return object_name(self.prefix, key)

    async def read(self, key: str) -> bytes:
        return await self._call("read", key, self._get_bytes, self._name(key))

    async def write(self, key: str, data: bytes) -> None:
        await self._call("write", key, self._put, self._name(key), data)
        logger.debug(f"Put {len(data)} bytes to s3://{self.bucket}/{self._name(key)}")

    async def write_if_missing(self, key: str, data: bytes) -> bool:
        created = await self._call(
            "write_if_missing", key, self._put_if_absent, self._name(key), data
        )
        if not created:
            logger.debug(f"write_if_missing: {key} already exists, skipped")
        return created

    async def remove(self, key: str) -> None:
        name = self._name(key)
        await self._call("remove", key, self._head, name)
        await self._call("remove", key, self._delete, name)
        logger.debug(f"Deleted s3://{self.bucket}/{name}")

    async def remove_folder(self, folder: str) -> None:
        self._require_folder(folder)
        list_prefix = folder_prefix(self.prefix, folder)

        # Listing completes before any delete is issued
        names = await self._call("remove_folder", folder, self._list_names, list_prefix)
        if not names:
            logger.debug(f"remove_folder: nothing under s3://{self.bucket}/{list_prefix}")
            return

        async def _delete_one(name: str) -> None:
            await self._call("remove_folder", name, self._delete, name)

        deleted = await self.deleter.delete_all(names, _delete_one, folder=folder)
        logger.info(f"Removed folder s3://{self.bucket}/{list_prefix} ({deleted} objects)")

    async def stream_read(self, key: str) -> BinaryIO:
        response = await self._call("stream_read", key, self._get, self._name(key))
        return response["Body"]

    async def stream_write(self, key: str) -> BinaryIO:
        """
        Open a buffered writer for one object.

        The upload happens when the writer is closed. close() blocks the
        calling thread and ignores ``timeout``; await aclose() (or use
        ``async with``) to upload through a worker thread under the deadline.
        """
        name = self._name(key)

        def _upload(body: BinaryIO) -> None:
            try:
                self._put(name, body)
            except Exception as e:
                raise self.errors.wrap(e, "stream_write", key) from e

        async def _aupload(body: BinaryIO) -> None:
            await self._call("stream_write", key, self._put, name, body)

        return S3StreamWriter(
            _upload, key, spool_max_bytes=self.spool_max_bytes, aupload=_aupload
        )

    # --- Blocking helpers (run in a worker thread) ---

    def _get(self, name: str) -> dict:
        return self.client.get_object(Bucket=self.bucket, Key=name)

    def _get_bytes(self, name: str) -> bytes:
        body = self._get(name)["Body"]
        try:
            return body.read()
        finally:
            body.close()

    def _put(self, name: str, body: Any) -> None:
        self.client.put_object(Bucket=self.bucket, Key=name, Body=body)

    def _put_if_absent(self, name: str, data: bytes) -> bool:
        """Conditional put. False if the object exists or a racing create holds it."""
        try:
            self.client.put_object(Bucket=self.bucket, Key=name, Body=data, IfNoneMatch="*")
        except ClientError as e:
            if self.errors.classify(e) == ErrorKind.ALREADY_EXISTS:
                return False
            raise
        return True

    def _head(self, name: str) -> None:
        self.client.head_object(Bucket=self.bucket, Key=name)

    def _delete(self, name: str) -> None:
        self.client.delete_object(Bucket=self.bucket, Key=name)

    def _list_names(self, list_prefix: str) -> list[str]:
        paginator = self.client.get_paginator("list_objects_v2")
        names = []
        for page in paginator.paginate(Bucket=self.bucket, Prefix=list_prefix):
            for obj in page.get("Contents", []):
                names.append(obj["Key"])
        return names
