# src/image_resizer/core/error_handling.py

import functools
import logging

from botocore.exceptions import BotoCoreError, ClientError
from PIL import Image, UnidentifiedImageError

from .exceptions import (
    CodecError,
    CodecErrorKind,
    ImageResizerError,
    StoreError,
    StoreErrorKind,
)

NOT_FOUND_ERROR_CODES = ("NoSuchKey", "NoSuchBucket", "NotFound", "404")
FORBIDDEN_ERROR_CODES = ("AccessDenied", "AllAccessDisabled", "Forbidden", "403")


def classify_client_error(error: ClientError) -> StoreErrorKind:
    """Map a botocore ClientError onto a gateway failure class."""
    code = str(error.response.get("Error", {}).get("Code", ""))
    if code in NOT_FOUND_ERROR_CODES:
        return StoreErrorKind.NOT_FOUND
    if code in FORBIDDEN_ERROR_CODES:
        return StoreErrorKind.FORBIDDEN
    return StoreErrorKind.TRANSPORT


def with_error_handling(func):
    """
    A decorator to wrap gateway and codec calls with standardized error handling.

    botocore and Pillow failures are translated into StoreError and CodecError,
    chained to the original exception. Anything else is logged and re-raised.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__ + '.' + func.__name__)
        try:
            return func(*args, **kwargs)
        except Exception as e:
            logger.error(
                f"Error in '{func.__name__}': {e}",
                exc_info=True
            )
            if isinstance(e, ImageResizerError):
                raise
            if isinstance(e, ClientError):
                raise StoreError(
                    f"S3 operation failed in {func.__name__}: {e}",
                    kind=classify_client_error(e),
                ) from e
            if isinstance(e, BotoCoreError):
                raise StoreError(
                    f"S3 transport failed in {func.__name__}: {e}",
                    kind=StoreErrorKind.TRANSPORT,
                ) from e
            if isinstance(e, (UnidentifiedImageError, Image.DecompressionBombError)):
                raise CodecError(
                    f"Failed to identify image in {func.__name__}: {e}",
                    kind=CodecErrorKind.UNDECODABLE,
                ) from e
            raise
    return wrapper
