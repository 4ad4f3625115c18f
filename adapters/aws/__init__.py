from adapters.aws.s3_blob_store import S3BlobStore
from adapters.aws.s3_stream import S3StreamWriter

__all__ = [
    "S3BlobStore",
    "S3StreamWriter",
]
