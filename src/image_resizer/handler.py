"""AWS Lambda entry point.

Configuration is read from the environment once per process; a
ConfigurationError there fails the cold start instead of every invocation.
"""

import functools
from typing import Any, Dict

from .core.factories import ResizePipelineFactory
from .core.models import PipelineConfig
from .core.pipeline import ResizePipeline


@functools.lru_cache(maxsize=None)
def get_pipeline() -> ResizePipeline:
    """Build the pipeline from environment configuration, once."""
    config = PipelineConfig.from_env()
    return ResizePipelineFactory.create_pipeline(config)


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Handle an S3 ObjectCreated notification.

    Args:
        event: S3 notification; only the first record is processed
        context: Lambda context, its request id is used as correlation id

    Returns:
        ``{"statusCode": ..., "body": ...}`` describing the outcome
    """
    pipeline = get_pipeline()
    result = pipeline.run(event, correlation_id=getattr(context, "aws_request_id", None))
    return result.to_response()
