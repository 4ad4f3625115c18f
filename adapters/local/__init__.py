from adapters.local.file_blob_store import FileBlobStore

__all__ = [
    "FileBlobStore",
]
