"""Factory classes for creating configured service instances."""

from typing import Any, Optional

import boto3

from .codec import PillowImageCodec
from .gateway import S3ObjectStoreGateway
from .models import PipelineConfig
from .observability import MetricsCollector, create_logger
from .pipeline import ResizePipeline
from .protocols import ImageCodec, LoggerProtocol, S3ClientProtocol


class S3ClientFactory:
    """Factory for creating S3 client instances."""

    @staticmethod
    def create_s3_client(**kwargs: Any) -> S3ClientProtocol:
        """Create S3 client with optional configuration."""
        session = boto3.Session()
        return session.client("s3", **kwargs)  # type: ignore


class ResizePipelineFactory:
    """Factory for creating the complete resize pipeline."""

    @staticmethod
    def create_pipeline(
        config: PipelineConfig,
        s3_client: Optional[S3ClientProtocol] = None,
        logger: Optional[LoggerProtocol] = None,
        codec: Optional[ImageCodec] = None,
        metrics_collector: Optional[MetricsCollector] = None,
    ) -> ResizePipeline:
        """Create a fully configured resize pipeline."""

        if s3_client is None:
            s3_client = S3ClientFactory.create_s3_client()

        if logger is None:
            logger = create_logger("image-resizer.pipeline")

        if codec is None:
            codec = PillowImageCodec(
                preserve_format=config.preserve_content_type,
                output_format=config.output_format,
            )

        return ResizePipeline(
            config=config,
            gateway=S3ObjectStoreGateway(s3_client),
            codec=codec,
            logger=logger,
            metrics_collector=metrics_collector,
        )
