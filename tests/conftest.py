"""
Shared fixtures.

The S3 fixtures run against FakeS3Client (tests/fakes.py); a real bucket
is only touched by the live tests.
"""

import pytest

from adapters.aws.s3_blob_store import S3BlobStore
from adapters.local.file_blob_store import FileBlobStore
from fakes import TEST_BUCKET, TEST_PREFIX, FakeS3Client


@pytest.fixture
def fake_s3():
    return FakeS3Client()


@pytest.fixture
def s3_store(fake_s3):
    return S3BlobStore(TEST_BUCKET, prefix=TEST_PREFIX, client=fake_s3)


@pytest.fixture
def file_store(tmp_path):
    return FileBlobStore(tmp_path / "blobs")


@pytest.fixture(params=["local", "s3"])
def store(request, tmp_path):
    """The same contract, once per backend."""
    if request.param == "local":
        return FileBlobStore(tmp_path / "blobs", prefix=TEST_PREFIX)
    return S3BlobStore(TEST_BUCKET, prefix=TEST_PREFIX, client=FakeS3Client())
