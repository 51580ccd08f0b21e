"""Custom exceptions for the image resizer."""

from __future__ import annotations

from enum import Enum


class ImageResizerError(Exception):
    """Base exception for all image resizer errors."""

    status_code = 500


class InputError(ImageResizerError):
    """Error raised for malformed trigger events or unusable object keys."""

    status_code = 400


class ConfigurationError(ImageResizerError):
    """Error raised for invalid configuration options."""


class StoreErrorKind(str, Enum):
    """Failure classes reported by the object store gateway."""

    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    TRANSPORT = "transport"


class StoreError(ImageResizerError):
    """Error raised for object store failures on fetch, read or store."""

    status_code = 500

    def __init__(self, message: str, kind: StoreErrorKind = StoreErrorKind.TRANSPORT):
        super().__init__(message)
        self.kind = kind


class CodecErrorKind(str, Enum):
    """Failure classes reported by the image codec."""

    UNDECODABLE = "undecodable"
    UNSUPPORTED = "unsupported"


class CodecError(ImageResizerError):
    """Error raised when an image cannot be decoded or re-encoded."""

    status_code = 422

    def __init__(
        self, message: str, kind: CodecErrorKind = CodecErrorKind.UNDECODABLE
    ):
        super().__init__(message)
        self.kind = kind
