"""Tests for the Lambda entry point."""

import json
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from image_resizer import handler
from image_resizer.core.exceptions import ConfigurationError
from image_resizer.core.models import ENV_FIELDS
from image_resizer.testing.fakes import FakeLogger, make_s3_event, setup_test_s3_environment


@pytest.fixture(autouse=True)
def lambda_environment(monkeypatch):
    for env_name in ENV_FIELDS:
        monkeypatch.delenv(env_name, raising=False)
    monkeypatch.setenv("TARGET_HEIGHT", "100")
    monkeypatch.setenv("DEST_BUCKET", "test-thumbs")
    handler.get_pipeline.cache_clear()
    yield
    handler.get_pipeline.cache_clear()


@pytest.fixture
def fake_s3():
    fake_s3 = setup_test_s3_environment()
    with patch(
        "image_resizer.core.factories.S3ClientFactory.create_s3_client",
        return_value=fake_s3,
    ), patch("image_resizer.core.factories.create_logger", return_value=FakeLogger()):
        yield fake_s3


def test_lambda_handler_completes(fake_s3):
    context = SimpleNamespace(aws_request_id="req-123")

    response = handler.lambda_handler(make_s3_event("test-photos", "uploads/large.jpg"), context)

    assert response["statusCode"] == 200
    body = json.loads(response["body"])
    assert body["derivative"]["bucket"] == "test-thumbs"
    assert fake_s3.get_bucket("test-thumbs").get_object("uploads/large_resized.jpg")


def test_lambda_handler_skips_derivative(fake_s3):
    response = handler.lambda_handler(
        make_s3_event("test-thumbs", "uploads/large_resized.jpg"), None
    )

    body = json.loads(response["body"])
    assert response["statusCode"] == 200
    assert body["status"] == "skipped"
    assert body["reason"] == "already processed"
    assert fake_s3.operation_count == 0


def test_lambda_handler_bad_event(fake_s3):
    response = handler.lambda_handler({"Records": []}, None)

    body = json.loads(response["body"])
    assert response["statusCode"] == 400
    assert body["stage"] == "normalize"


def test_pipeline_is_built_once(fake_s3):
    assert handler.get_pipeline() is handler.get_pipeline()
    assert handler.get_pipeline().config.target_height == 100


def test_invalid_environment_fails_cold_start(monkeypatch):
    monkeypatch.setenv("TARGET_HEIGHT", "tall")

    with pytest.raises(ConfigurationError):
        handler.lambda_handler(make_s3_event("test-photos", "a.jpg"), None)
