"""Tests for logging setup in and outside the Lambda runtime."""

import logging
import sys

import pytest

from image_resizer.core.logging_config import (
    LAMBDA_FUNCTION_ENV,
    build_formatter,
    get_logger,
    resolve_level,
    setup_logger,
)


@pytest.fixture(autouse=True)
def logging_environment(monkeypatch):
    for env_name in ("LOG_LEVEL", "LOG_FORMAT", "AWS_LAMBDA_LOG_LEVEL", LAMBDA_FUNCTION_ENV):
        monkeypatch.delenv(env_name, raising=False)


@pytest.fixture
def fresh_logger_name(request):
    """A logger name no other test has configured."""
    name = f"test-logging.{request.node.name}"
    yield name
    logger = logging.getLogger(name)
    logger.handlers.clear()
    logger.propagate = True


@pytest.fixture
def lambda_root_handler(monkeypatch):
    """Simulate the handler the Lambda runtime installs on the root logger."""
    monkeypatch.setenv(LAMBDA_FUNCTION_ENV, "image-resizer")
    handler = logging.NullHandler()
    root = logging.getLogger()
    root.addHandler(handler)
    yield handler
    root.removeHandler(handler)


class TestResolveLevel:
    """Tests for resolve_level."""

    def test_default_is_info(self):
        assert resolve_level() == logging.INFO

    def test_argument_wins_over_environment(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        assert resolve_level("debug") == logging.DEBUG

    def test_log_level_wins_over_lambda_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        monkeypatch.setenv("AWS_LAMBDA_LOG_LEVEL", "DEBUG")
        assert resolve_level() == logging.WARNING

    def test_lambda_log_level_is_used_when_log_level_unset(self, monkeypatch):
        monkeypatch.setenv("AWS_LAMBDA_LOG_LEVEL", "ERROR")
        assert resolve_level() == logging.ERROR

    @pytest.mark.parametrize("name", ["LOUD", "BASIC_FORMAT", "getLogger"])
    def test_unknown_names_fall_back_to_info(self, name):
        assert resolve_level(name) == logging.INFO


class TestBuildFormatter:
    """Tests for build_formatter."""

    def test_structured_includes_function_name(self):
        assert "%(funcName)s" in build_formatter("structured")._fmt

    def test_simple(self):
        assert build_formatter("SIMPLE")._fmt == "%(levelname)s %(name)s: %(message)s"

    def test_unknown_format_is_structured(self):
        assert build_formatter("xml")._fmt == build_formatter("structured")._fmt


class TestSetupLoggerOutsideLambda:
    """The CLI and tests log to stdout through their own handler."""

    def test_attaches_single_stdout_handler(self, fresh_logger_name):
        first = setup_logger(fresh_logger_name)
        second = setup_logger(fresh_logger_name, level="ERROR")

        assert first is second
        assert len(first.handlers) == 1
        assert first.handlers[0].stream is sys.stdout
        assert first.level == logging.ERROR
        assert not first.propagate

    def test_log_format_environment_overrides_argument(self, fresh_logger_name, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "simple")

        logger = setup_logger(fresh_logger_name, format_type="structured")

        assert "%(funcName)s" not in logger.handlers[0].formatter._fmt

    def test_get_logger_default_name(self):
        assert get_logger().name == "image-resizer"


class TestSetupLoggerInLambda:
    """Inside Lambda the runtime's root handler does the output."""

    def test_propagates_to_runtime_handler(self, fresh_logger_name, lambda_root_handler):
        logger = setup_logger(fresh_logger_name, level="DEBUG")

        assert logger.handlers == []
        assert logger.propagate
        assert logger.level == logging.DEBUG

    def test_records_reach_runtime_handler(self, fresh_logger_name, lambda_root_handler):
        records = []
        lambda_root_handler.handle = records.append

        setup_logger(fresh_logger_name).info("resized")

        assert [record.getMessage() for record in records] == ["resized"]

    def test_lambda_without_root_handler_uses_stdout(self, fresh_logger_name, monkeypatch):
        monkeypatch.setenv(LAMBDA_FUNCTION_ENV, "image-resizer")
        monkeypatch.setattr(logging.getLogger(), "handlers", [])

        logger = setup_logger(fresh_logger_name)

        assert len(logger.handlers) == 1
        assert not logger.propagate
