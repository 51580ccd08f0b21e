"""Normalization of raw S3 event notifications."""

from datetime import datetime
from typing import Any, Mapping, Optional
from urllib.parse import unquote_plus

from .exceptions import InputError
from .models import PipelineConfig, TriggerEvent


def _mapping(value: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise InputError(f"Event is missing the '{what}' section")
    return value


def _required_str(value: Any, what: str) -> str:
    if not isinstance(value, str) or not value:
        raise InputError(f"missing {what}")
    return value


def _parse_event_time(value: Any) -> Optional[datetime]:
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def normalize_event(
    raw: Any, config: Optional[PipelineConfig] = None
) -> TriggerEvent:
    """
    Reduce an S3 notification to a :class:`TriggerEvent`.

    Only the first record is used. Object keys arrive URL-encoded and are
    decoded here.

    Args:
        raw: Notification as delivered to the function
        config: When given and ``source_bucket`` is set, events from any other
            bucket are rejected

    Returns:
        The normalized event

    Raises:
        InputError: If the event lacks a record, bucket, key or region
    """
    event = _mapping(raw, "event")
    records = event.get("Records")
    if not isinstance(records, list) or not records:
        raise InputError("Event has no Records")

    record = _mapping(records[0], "Records[0]")
    s3 = _mapping(record.get("s3"), "s3")
    s3_object = _mapping(s3.get("object"), "s3.object")

    key = unquote_plus(_required_str(s3_object.get("key"), "key"))
    bucket = _required_str(_mapping(s3.get("bucket"), "s3.bucket").get("name"), "bucket")
    region = _required_str(record.get("awsRegion"), "region")

    if config is not None and config.source_bucket and bucket != config.source_bucket:
        raise InputError(
            f"Event bucket '{bucket}' is not the configured source bucket "
            f"'{config.source_bucket}'"
        )

    size = s3_object.get("size")
    event_name = record.get("eventName")
    return TriggerEvent(
        region=region,
        source_bucket=bucket,
        source_key=key,
        event_time=_parse_event_time(record.get("eventTime")),
        event_name=event_name if isinstance(event_name, str) else None,
        object_size=size if isinstance(size, int) else None,
    )
