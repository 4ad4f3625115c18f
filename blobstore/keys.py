"""
Key normalization.

Joins a store-wide prefix and a caller key into the name the medium
addresses. Joining follows POSIX path-join-and-clean semantics, so
"users/", "/123" and "users//123/." all land on "users/123".
"""

import posixpath
from pathlib import Path

SEPARATOR = "/"


def join_key(prefix: str, key: str) -> str:
    """Join prefix and key, collapsing separators. Empty prefix is the identity."""
    parts = [p for p in (prefix, key) if p]
    if not parts:
        return ""

    joined = posixpath.normpath(SEPARATOR.join(parts))
    if joined.startswith("//"):
        # normpath keeps a leading double slash (POSIX implementation-defined root)
        joined = joined[1:]
    return "" if joined == "." else joined


def object_name(prefix: str, key: str) -> str:
    """Object-store name for a key: the joined key without a leading separator."""
    return join_key(prefix, key).lstrip(SEPARATOR)


def folder_prefix(prefix: str, folder: str) -> str:
    """Listing prefix matching every object strictly under folder."""
    return object_name(prefix, folder) + SEPARATOR


def local_path(root: Path, prefix: str, key: str) -> Path:
    """Filesystem path for a key, mapped segment by segment under root."""
    segments = [s for s in join_key(prefix, key).split(SEPARATOR) if s]
    return Path(root, *segments)
