"""Testing utilities and fakes for the image resizer."""

from .fakes import (
    BrokenStream,
    FakeS3Client,
    FakeLogger,
    S3Object,
    S3Bucket,
    client_error,
    create_test_image,
    make_s3_event,
    setup_test_s3_environment,
)

__all__ = [
    "BrokenStream",
    "FakeS3Client",
    "FakeLogger",
    "S3Object",
    "S3Bucket",
    "client_error",
    "create_test_image",
    "make_s3_event",
    "setup_test_s3_environment",
]
