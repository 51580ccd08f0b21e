"""S3-backed object store gateway."""

from typing import Any, Dict, Optional

from .error_handling import with_error_handling
from .exceptions import StoreError, StoreErrorKind
from .models import FetchedObject, ObjectPayload
from .protocols import S3ClientProtocol


class S3ObjectStoreGateway:
    """Object store gateway over a boto3 S3 client.

    Failures surface as StoreError through ``with_error_handling``.
    """

    def __init__(self, s3_client: S3ClientProtocol):
        self._s3_client = s3_client

    @with_error_handling
    def fetch(self, bucket: str, key: str) -> FetchedObject:
        """Open ``s3://bucket/key``; the body is returned unread."""
        response = self._s3_client.get_object(Bucket=bucket, Key=key)
        return FetchedObject(
            body=response["Body"],
            content_type=response.get("ContentType") or "application/octet-stream",
            metadata=dict(response.get("Metadata") or {}),
        )

    @with_error_handling
    def store(
        self,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str,
        metadata: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """Write ``body`` to ``s3://bucket/key``, replacing any existing object."""
        params: Dict[str, Any] = {
            "Bucket": bucket,
            "Key": key,
            "Body": body,
            "ContentType": content_type,
        }
        if metadata:
            params["Metadata"] = metadata
        return self._s3_client.put_object(**params)


@with_error_handling
def materialize(fetched: FetchedObject) -> ObjectPayload:
    """
    Drain a fetched body into memory.

    The codec needs the complete image, so the stream is read to the end
    and closed.

    Raises:
        StoreError: If reading the stream fails
    """
    try:
        data = fetched.body.read()
    except OSError as e:
        raise StoreError(
            f"Reading object body failed: {e}", kind=StoreErrorKind.TRANSPORT
        ) from e
    finally:
        close = getattr(fetched.body, "close", None)
        if close is not None:
            close()

    if not isinstance(data, bytes):
        raise StoreError(
            f"Object body yielded {type(data).__name__}, expected bytes",
            kind=StoreErrorKind.TRANSPORT,
        )
    return ObjectPayload(data=data, content_type=fetched.content_type)
