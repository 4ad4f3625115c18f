"""
Blob store wiring — picks the adapter named by a StoreConfig.

Usage:
    from adapters.factory import create_blob_store
    from blobstore.models.config import StoreConfig

    store = create_blob_store(StoreConfig.from_env())
"""

import logging
from typing import Optional

from adapters.aws.s3_blob_store import S3BlobStore
from adapters.local.file_blob_store import FileBlobStore
from blobstore.interfaces.blob_store import BlobStore
from blobstore.models.config import StoreConfig

logger = logging.getLogger("blobstore.config")


def create_blob_store(config: Optional[StoreConfig] = None) -> BlobStore:
    """Build the blob store for a config (defaults to the environment)."""
    if config is None:
        config = StoreConfig.from_env()
    config.validate()

    if config.backend == "s3":
        store: BlobStore = S3BlobStore(
            bucket=config.bucket,
            prefix=config.prefix,
            region=config.region,
            endpoint_url=config.endpoint_url,
            max_delete_concurrency=config.max_delete_concurrency,
            timeout=config.timeout,
        )
        logger.info(f"Blob store: s3://{config.bucket}/{config.prefix}")
    else:
        store = FileBlobStore(
            base_path=config.base_path,
            prefix=config.prefix,
            timeout=config.timeout,
        )
        logger.info(f"Blob store: local {config.base_path}")
    return store
