"""
Error classification tests.
"""

import pytest
from botocore.exceptions import ClientError

from blobstore.errors.handler import ErrorHandler, error_code
from blobstore.errors.models import (
    BlobNotFound,
    BlobOperationCancelled,
    ErrorKind,
    MediumError,
)
from fakes import client_error


@pytest.fixture
def handler():
    return ErrorHandler()


@pytest.mark.parametrize(
    "code,status,expected",
    [
        ("NoSuchKey", 404, ErrorKind.NOT_FOUND),
        ("404", 404, ErrorKind.NOT_FOUND),
        ("PreconditionFailed", 412, ErrorKind.ALREADY_EXISTS),
        ("ConditionalRequestConflict", 409, ErrorKind.ALREADY_EXISTS),
        ("AccessDenied", 403, ErrorKind.MEDIUM),
        ("NoSuchBucket", 404, ErrorKind.MEDIUM),
        ("SlowDown", 503, ErrorKind.MEDIUM),
    ],
)
def test_classify_client_errors(handler, code, status, expected):
    assert handler.classify(client_error(code, status, "Op")) == expected


def test_error_code_falls_back_to_status():
    error = ClientError({"Error": {}, "ResponseMetadata": {"HTTPStatusCode": 412}}, "PutObject")
    assert error_code(error) == "412"


@pytest.mark.parametrize(
    "error,expected",
    [
        (FileNotFoundError(2, "No such file"), ErrorKind.NOT_FOUND),
        (FileExistsError(17, "File exists"), ErrorKind.ALREADY_EXISTS),
        (TimeoutError(110, "Connection timed out"), ErrorKind.MEDIUM),
        (PermissionError(13, "Permission denied"), ErrorKind.MEDIUM),
        (ValueError("weird"), ErrorKind.MEDIUM),
    ],
)
def test_classify_os_errors(handler, error, expected):
    assert handler.classify(error) == expected


def test_wrap_not_found(handler):
    wrapped = handler.wrap(FileNotFoundError(2, "No such file"), "read", "a/b.txt")

    assert isinstance(wrapped, BlobNotFound)
    assert wrapped.operation == "read"
    assert wrapped.key == "a/b.txt"
    assert isinstance(wrapped.original_error, FileNotFoundError)


def test_wrap_medium_timeout_is_plain_medium_error(handler):
    wrapped = handler.wrap(TimeoutError(110, "Connection timed out"), "write", "k")

    assert isinstance(wrapped, MediumError)
    assert not isinstance(wrapped, BlobOperationCancelled)
    assert wrapped.kind == ErrorKind.MEDIUM


def test_cancelled_is_cancelled_medium_error(handler, caplog):
    with caplog.at_level("WARNING", logger="blobstore.errors"):
        wrapped = handler.cancelled(TimeoutError(), "write", "k")

    assert isinstance(wrapped, BlobOperationCancelled)
    assert isinstance(wrapped, MediumError)
    assert wrapped.kind == ErrorKind.CANCELLED
    assert "[write] CANCELLED" in caplog.text


def test_wrap_passes_through_store_errors(handler):
    original = MediumError("already wrapped", "remove_folder", "x")
    assert handler.wrap(original, "remove_folder", "y") is original


def test_wrap_logs_medium_errors(handler, caplog):
    with caplog.at_level("ERROR", logger="blobstore.errors"):
        handler.wrap(PermissionError(13, "Permission denied"), "write", "k")

    assert "[write] MEDIUM" in caplog.text


def test_to_dict(handler):
    wrapped = handler.wrap(client_error("AccessDenied", 403, "GetObject"), "read", "k")
    data = wrapped.to_dict()

    assert data["kind"] == "medium"
    assert data["operation"] == "read"
    assert data["key"] == "k"
    assert "AccessDenied" in data["original_error"]
