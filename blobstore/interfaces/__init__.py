"""
Blobstore Interfaces — Medium-agnostic contracts.

All application code depends on these interfaces only.
Medium-specific implementations live in adapters/.
"""

from blobstore.interfaces.blob_store import BlobStore
from blobstore.errors.models import BlobNotFound, MediumError

__all__ = [
    "BlobStore", "BlobNotFound", "MediumError",
]
