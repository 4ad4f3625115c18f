from blobstore.errors.models import (
    BlobNotFound,
    BlobOperationCancelled,
    BlobStoreError,
    ConfigurationError,
    ErrorKind,
    FolderRemovalError,
    MediumError,
)
from blobstore.errors.handler import ErrorHandler

__all__ = [
    "BlobStoreError", "BlobNotFound", "MediumError",
    "BlobOperationCancelled", "FolderRemovalError", "ConfigurationError",
    "ErrorKind", "ErrorHandler",
]
