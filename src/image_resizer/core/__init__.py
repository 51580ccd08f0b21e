"""Core components of the image resizer."""

from .codec import PillowImageCodec
from .events import normalize_event
from .exceptions import (
    ImageResizerError,
    InputError,
    ConfigurationError,
    StoreError,
    StoreErrorKind,
    CodecError,
    CodecErrorKind,
)
from .gateway import S3ObjectStoreGateway, materialize
from .keys import derive_destination, derive_key, is_derivative
from .logging_config import get_logger, setup_logger
from .models import (
    Completed,
    Failed,
    ImageDimensions,
    MarkerStrategy,
    ObjectLocator,
    ObjectPayload,
    PipelineConfig,
    PipelineResult,
    PipelineStage,
    SkipReason,
    Skipped,
    TriggerEvent,
)
from .pipeline import ResizePipeline
from .size_gate import should_resize

__all__ = [
    "PipelineConfig",
    "MarkerStrategy",
    "TriggerEvent",
    "ObjectLocator",
    "ObjectPayload",
    "ImageDimensions",
    "PipelineStage",
    "SkipReason",
    "PipelineResult",
    "Skipped",
    "Completed",
    "Failed",
    "normalize_event",
    "is_derivative",
    "derive_key",
    "derive_destination",
    "should_resize",
    "materialize",
    "S3ObjectStoreGateway",
    "PillowImageCodec",
    "ResizePipeline",
    "setup_logger",
    "get_logger",
    "ImageResizerError",
    "InputError",
    "ConfigurationError",
    "StoreError",
    "StoreErrorKind",
    "CodecError",
    "CodecErrorKind",
]
