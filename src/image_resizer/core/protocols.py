"""Protocol definitions for dependency injection and testability."""

from typing import Any, Dict, Optional, Protocol

from .models import FetchedObject, ImageDimensions


class S3ClientProtocol(Protocol):
    """Protocol for the S3 client operations the gateway uses."""

    def get_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        """Get object from S3."""
        ...

    def put_object(self, **kwargs: Any) -> Dict[str, Any]:
        """Put object to S3."""
        ...


class ObjectStoreGateway(Protocol):
    """Protocol for fetching sources and storing derivatives."""

    def fetch(self, bucket: str, key: str) -> FetchedObject:
        """Open an object for reading."""
        ...

    def store(
        self,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str,
        metadata: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """Write an object, overwriting any existing one."""
        ...


class ImageCodec(Protocol):
    """Protocol for image probing and resizing."""

    def probe(self, image_bytes: bytes) -> ImageDimensions:
        """Read image dimensions."""
        ...

    def transform(self, image_bytes: bytes, target_height: int) -> bytes:
        """Resize to ``target_height``, scaling width proportionally."""
        ...

    def output_content_type(self, source_content_type: str) -> str:
        """Content type of what ``transform`` produces."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log error message."""
        ...
