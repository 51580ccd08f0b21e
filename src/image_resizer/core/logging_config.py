"""Logging setup for the image resizer, inside Lambda and on the command line.

In a Lambda container the runtime installs a handler on the root logger that
stamps every record with the request id and ships it to CloudWatch. Loggers
created there propagate to that handler instead of printing a second copy.
Everywhere else (the CLI, tests) a stdout handler is attached.
"""

import os
import sys
import logging
from typing import Optional

# Present in every Lambda execution environment
LAMBDA_FUNCTION_ENV = "AWS_LAMBDA_FUNCTION_NAME"

# Set by Lambda's advanced logging controls
LAMBDA_LOG_LEVEL_ENV = "AWS_LAMBDA_LOG_LEVEL"

FORMATS = {
    "structured": "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s | %(message)s",
    "simple": "%(levelname)s %(name)s: %(message)s",
}


def resolve_level(level: Optional[str] = None) -> int:
    """
    Pick the log level.

    The first of ``level``, ``LOG_LEVEL`` and ``AWS_LAMBDA_LOG_LEVEL`` that is
    set wins. Names that are not logging levels fall back to INFO.
    """
    name = level or os.getenv("LOG_LEVEL") or os.getenv(LAMBDA_LOG_LEVEL_ENV)
    if not name:
        return logging.INFO
    value = getattr(logging, name.strip().upper(), None)
    return value if isinstance(value, int) else logging.INFO


def build_formatter(format_type: str) -> logging.Formatter:
    """Formatter for ``structured`` or ``simple`` output; unknown names get structured."""
    fmt = FORMATS.get(format_type.strip().lower(), FORMATS["structured"])
    return logging.Formatter(fmt, datefmt="%Y-%m-%dT%H:%M:%S%z")


def lambda_runtime_handles_logging() -> bool:
    """True inside a Lambda container whose runtime configured the root logger."""
    return bool(os.getenv(LAMBDA_FUNCTION_ENV)) and bool(logging.getLogger().handlers)


def setup_logger(
    name: str = "image-resizer",
    level: Optional[str] = None,
    format_type: str = "structured",
) -> logging.Logger:
    """
    Configure and return the logger called ``name``.

    Safe to call on every warm invocation: the stdout handler is attached
    once, while the level is re-applied each time.

    Args:
        name: Logger name
        level: Level override, see :func:`resolve_level`
        format_type: ``structured`` or ``simple``; ``LOG_FORMAT`` takes precedence

    Environment Variables:
        LOG_LEVEL: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        AWS_LAMBDA_LOG_LEVEL: Used when LOG_LEVEL is unset
        LOG_FORMAT: ``structured`` or ``simple``
    """
    logger = logging.getLogger(name)
    logger.setLevel(resolve_level(level))

    if lambda_runtime_handles_logging():
        logger.propagate = True
        return logger

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(build_formatter(os.getenv("LOG_FORMAT", format_type)))
        logger.addHandler(handler)

    logger.propagate = False
    return logger


def get_logger(name: str = "image-resizer") -> logging.Logger:
    return setup_logger(name)
