"""Shared data models for the image resizer."""

import json
import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, BinaryIO, Dict, Literal, Mapping, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from .exceptions import ConfigurationError, ImageResizerError


class MarkerStrategy(str, Enum):
    """How derivative keys are marked."""

    INFIX = "infix"
    PREFIX = "prefix"


class PipelineStage(str, Enum):
    """Pipeline stages that can fail."""

    NORMALIZE = "normalize"
    FETCH = "fetch"
    MATERIALIZE = "materialize"
    PROBE = "probe"
    TRANSFORM = "transform"
    DERIVE = "derive"
    STORE = "store"


class SkipReason(str, Enum):
    """Reasons for a pipeline run to end without producing a derivative."""

    ALREADY_PROCESSED = "already processed"
    SOURCE_TOO_SMALL = "source too small"


# Environment variable -> PipelineConfig field
ENV_FIELDS = {
    "TARGET_HEIGHT": "target_height",
    "SOURCE_BUCKET": "source_bucket",
    "DEST_BUCKET": "destination_bucket",
    "SOURCE_PREFIX": "source_prefix",
    "DEST_PREFIX": "destination_prefix",
    "DERIVATIVE_MARKER": "derivative_marker",
    "MARKER_STRATEGY": "marker_strategy",
    "PRESERVE_CONTENT_TYPE": "preserve_content_type",
    "OUTPUT_FORMAT": "output_format",
}


class PipelineConfig(BaseModel):
    """Process-wide configuration, loaded once and never mutated."""

    model_config = ConfigDict(frozen=True)

    target_height: int = Field(default=200, gt=0)
    source_bucket: Optional[str] = None
    destination_bucket: Optional[str] = None
    source_prefix: str = ""
    destination_prefix: str = ""
    derivative_marker: str = Field(default="_resized", min_length=1)
    marker_strategy: MarkerStrategy = MarkerStrategy.INFIX
    # When false, derivatives are re-encoded as output_format but keep the
    # source extension in their key; the stored Content-Type is authoritative
    preserve_content_type: bool = True
    output_format: str = "JPEG"

    @field_validator("source_bucket", "destination_bucket", mode="before")
    @classmethod
    def _blank_bucket_is_unset(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("source_prefix", "destination_prefix")
    @classmethod
    def _normalize_prefix(cls, value: str) -> str:
        value = value.strip().lstrip("/")
        if value and not value.endswith("/"):
            value += "/"
        return value

    @field_validator("derivative_marker")
    @classmethod
    def _check_marker(cls, value: str) -> str:
        if "/" in value or "." in value:
            raise ValueError("derivative_marker may not contain '/' or '.'")
        return value

    @field_validator("output_format")
    @classmethod
    def _upper_format(cls, value: str) -> str:
        return value.strip().upper()

    @model_validator(mode="after")
    def _check_prefixes(self) -> "PipelineConfig":
        # Sources living under the output prefix would all look like derivatives
        if (
            self.marker_strategy is MarkerStrategy.PREFIX
            and self.destination_prefix
            and self.source_prefix.startswith(self.destination_prefix)
        ):
            raise ValueError(
                f"source_prefix '{self.source_prefix}' must not live under "
                f"destination_prefix '{self.destination_prefix}'"
            )
        return self

    def destination_bucket_for(self, source_bucket: str) -> str:
        """Bucket derivatives are written to; same-bucket mode when unset."""
        return self.destination_bucket or source_bucket

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any
    ) -> "PipelineConfig":
        """
        Build the configuration from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)
            **overrides: Field values taking precedence over the environment

        Returns:
            Validated, frozen configuration

        Raises:
            ConfigurationError: If any value is invalid
        """
        environ = os.environ if environ is None else environ
        values: Dict[str, Any] = {
            field_name: environ[env_name]
            for env_name, field_name in ENV_FIELDS.items()
            if env_name in environ
        }
        values.update({k: v for k, v in overrides.items() if v is not None})

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid pipeline configuration: {e}") from e


class ObjectLocator(BaseModel):
    """Identifies a stored object."""

    model_config = ConfigDict(frozen=True)

    bucket: str = Field(min_length=1)
    key: str = Field(min_length=1)

    @property
    def uri(self) -> str:
        return f"s3://{self.bucket}/{self.key}"


class TriggerEvent(BaseModel):
    """One object-creation notification, reduced to what the pipeline needs."""

    model_config = ConfigDict(frozen=True)

    region: str = Field(min_length=1)
    source_bucket: str = Field(min_length=1)
    source_key: str = Field(min_length=1)
    event_time: Optional[datetime] = None
    event_name: Optional[str] = None
    object_size: Optional[int] = None

    @property
    def source(self) -> ObjectLocator:
        return ObjectLocator(bucket=self.source_bucket, key=self.source_key)


@dataclass
class FetchedObject:
    """Object as returned by the gateway, body not yet read."""

    body: BinaryIO
    content_type: str = "application/octet-stream"
    metadata: Dict[str, str] = field(default_factory=dict)


class ObjectPayload(BaseModel):
    """Fully materialized object body."""

    data: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.data)


class ImageDimensions(BaseModel):
    """Probed image size in pixels."""

    model_config = ConfigDict(frozen=True)

    height: int = Field(gt=0)
    width: int = Field(gt=0)


class _Outcome(BaseModel):
    """Common behaviour of the pipeline result variants."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    status_code: int = 200
    source: Optional[ObjectLocator] = None

    @property
    def message(self) -> str:
        raise NotImplementedError

    def to_response(self) -> Dict[str, Any]:
        """Serialize to the Lambda-style ``{statusCode, body}`` shape."""
        body = self.model_dump(mode="json", exclude={"status_code"}, exclude_none=True)
        body["message"] = self.message
        return {"statusCode": self.status_code, "body": json.dumps(body)}


class Skipped(_Outcome):
    """No derivative was produced, by design."""

    status: Literal["skipped"] = "skipped"
    reason: SkipReason
    detail: Optional[int] = None

    @property
    def message(self) -> str:
        target = self.source.uri if self.source else "object"
        message = f"Skipped {target}: {self.reason.value}"
        if self.detail is not None:
            message += f" (height={self.detail})"
        return message


class Completed(_Outcome):
    """A derivative was stored."""

    status: Literal["completed"] = "completed"
    derivative: ObjectLocator
    dimensions: Optional[ImageDimensions] = None

    @property
    def message(self) -> str:
        source = f" from {self.source.uri}" if self.source else ""
        return f"Stored derivative {self.derivative.uri}{source}"


class Failed(_Outcome):
    """A stage failed; ``error`` keeps the original exception chain."""

    status: Literal["failed"] = "failed"
    status_code: int = 500
    stage: PipelineStage
    cause: str
    error_type: str
    error: Optional[BaseException] = Field(default=None, exclude=True, repr=False)

    @property
    def message(self) -> str:
        return f"Stage '{self.stage.value}' failed: {self.cause}"

    @classmethod
    def from_error(
        cls,
        stage: PipelineStage,
        error: BaseException,
        source: Optional[ObjectLocator] = None,
    ) -> "Failed":
        """Classify an exception raised while running ``stage``."""
        status_code = error.status_code if isinstance(error, ImageResizerError) else 500
        return cls(
            stage=stage,
            cause=str(error) or type(error).__name__,
            error_type=type(error).__name__,
            status_code=status_code,
            source=source,
            error=error,
        )


PipelineResult = Union[Skipped, Completed, Failed]
