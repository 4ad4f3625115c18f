"""
Local filesystem blob store tests.
"""

import os
import time

import pytest

from adapters.local.file_blob_store import FileBlobStore
from blobstore.errors.models import BlobNotFound, BlobOperationCancelled, MediumError


async def test_keys_mirror_onto_directories(file_store, tmp_path):
    await file_store.write("users/123/test_file.txt", b"Hello, Local Files!")

    path = tmp_path / "blobs" / "users" / "123" / "test_file.txt"
    assert path.read_bytes() == b"Hello, Local Files!"


async def test_prefix_applied_under_base_path(tmp_path):
    store = FileBlobStore(tmp_path, prefix="tenant-a/")
    await store.write("/memory//2026.json", b"{}")

    assert (tmp_path / "tenant-a" / "memory" / "2026.json").read_bytes() == b"{}"


async def test_leading_separator_stays_under_base(tmp_path):
    store = FileBlobStore(tmp_path / "root")
    await store.write("/etc/passwd", b"nope")

    assert (tmp_path / "root" / "etc" / "passwd").exists()


async def test_write_if_missing_is_exclusive_create(file_store, tmp_path, monkeypatch):
    opened_flags = []
    real_open = os.open

    def spy_open(path, flags, *args):
        opened_flags.append(flags)
        return real_open(path, flags, *args)

    monkeypatch.setattr(os, "open", spy_open)
    await file_store.write_if_missing("excl.txt", b"v")

    assert opened_flags
    assert opened_flags[0] & os.O_CREAT
    assert opened_flags[0] & os.O_EXCL


async def test_write_if_missing_removes_partial_file(file_store, tmp_path, monkeypatch):
    """A failed payload write must not leave a blob that later creates skip over."""

    class FullDisk:
        def __init__(self, fd):
            self.fd = fd

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            os.close(self.fd)

        def write(self, data):
            raise OSError(28, "No space left on device")

    monkeypatch.setattr(os, "fdopen", lambda fd, mode: FullDisk(fd))

    with pytest.raises(MediumError) as exc_info:
        await file_store.write_if_missing("full.txt", b"payload")

    assert exc_info.value.operation == "write_if_missing"
    assert not (tmp_path / "blobs" / "full.txt").exists()


async def test_write_if_missing_creation_failure_is_medium_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_bytes(b"a file, not a directory")
    store = FileBlobStore(tmp_path)

    with pytest.raises(MediumError):
        await store.write_if_missing("blocker/child.txt", b"v")


async def test_remove_folder_deletes_directory(file_store, tmp_path):
    await file_store.write("a/b/obj_0", b"x")
    await file_store.write("a/b/deep/obj_1", b"x")
    await file_store.write("a/keep", b"x")

    await file_store.remove_folder("a/b")

    assert not (tmp_path / "blobs" / "a" / "b").exists()
    assert (tmp_path / "blobs" / "a" / "keep").exists()


async def test_remove_directory_as_blob_is_medium_error(file_store):
    await file_store.write("dir/child", b"x")

    with pytest.raises(MediumError) as exc_info:
        await file_store.remove("dir")
    assert not isinstance(exc_info.value, BlobNotFound)


async def test_stream_write_creates_parents(file_store, tmp_path):
    handle = await file_store.stream_write("deep/er/still/file.bin")
    handle.write(b"abc")
    handle.close()

    assert (tmp_path / "blobs" / "deep" / "er" / "still" / "file.bin").read_bytes() == b"abc"


async def test_timeout_abandons_slow_call(file_store, monkeypatch):
    slow_store = FileBlobStore(file_store.base_path, timeout=0.05)
    await slow_store.write("slow.txt", b"v")

    monkeypatch.setattr(
        FileBlobStore, "_write", staticmethod(lambda path, data: time.sleep(0.5))
    )

    with pytest.raises(BlobOperationCancelled) as exc_info:
        await slow_store.write("slow.txt", b"v2")
    assert exc_info.value.key == "slow.txt"


async def test_remove_folder_stays_inside_prefix(tmp_path):
    tenant_a = FileBlobStore(tmp_path / "blobs", prefix="tenant-a")
    tenant_b = FileBlobStore(tmp_path / "blobs", prefix="tenant-b")
    await tenant_a.write("x/a.txt", b"a")
    await tenant_b.write("keep.txt", b"b")

    for folder in ("x/../..", "x/..", "."):
        with pytest.raises(ValueError):
            await tenant_a.remove_folder(folder)

    assert await tenant_a.read("x/a.txt") == b"a"
    assert await tenant_b.read("keep.txt") == b"b"


async def test_remove_folder_under_file_is_noop(file_store):
    await file_store.write("a/b.txt", b"keep")

    await file_store.remove_folder("a/b.txt/c")

    assert await file_store.read("a/b.txt") == b"keep"


async def test_medium_timeout_is_not_cancellation(file_store, monkeypatch):
    def timed_out(path, data):
        raise TimeoutError(110, "Connection timed out")

    monkeypatch.setattr(FileBlobStore, "_write", staticmethod(timed_out))

    with pytest.raises(MediumError) as exc_info:
        await file_store.write("nfs.txt", b"v")
    assert not isinstance(exc_info.value, BlobOperationCancelled)
