"""Pipeline orchestrator: one trigger event in, one PipelineResult out."""

import uuid
from typing import Any, Callable, Optional, TypeVar
from urllib.parse import quote

from .events import normalize_event
from .gateway import materialize
from .keys import derive_destination, is_derivative
from .models import (
    Completed,
    Failed,
    PipelineConfig,
    PipelineResult,
    PipelineStage,
    SkipReason,
    Skipped,
)
from .observability import LogContext, MetricsCollector, record_operation
from .protocols import ImageCodec, LoggerProtocol, ObjectStoreGateway
from .size_gate import should_resize

T = TypeVar("T")


class StageFailure(Exception):
    """Carries the stage an error was raised in up to ``run``."""

    def __init__(self, stage: PipelineStage, error: Exception):
        super().__init__(f"{stage.value}: {error}")
        self.stage = stage
        self.error = error


class ResizePipeline:
    """
    Sequences normalize, guard, fetch, materialize, probe, size gate,
    transform, derive and store for a single trigger event.

    The pipeline holds only the read-only configuration and its
    collaborators, so one instance can serve any number of invocations.
    """

    def __init__(
        self,
        config: PipelineConfig,
        gateway: ObjectStoreGateway,
        codec: ImageCodec,
        logger: LoggerProtocol,
        metrics_collector: Optional[MetricsCollector] = None,
    ):
        self._config = config
        self._gateway = gateway
        self._codec = codec
        self._logger = logger
        self._metrics_collector = metrics_collector

    @property
    def config(self) -> PipelineConfig:
        return self._config

    def run(self, raw_event: Any, correlation_id: Optional[str] = None) -> PipelineResult:
        """Process one raw trigger event; never raises."""
        log_context = LogContext(
            correlation_id=correlation_id or str(uuid.uuid4()),
            operation="resize",
            component="resize_pipeline",
        )
        source = None

        try:
            event = self._run_stage(
                PipelineStage.NORMALIZE,
                log_context,
                normalize_event,
                raw_event,
                self._config,
            )
            source = event.source
            log_context = log_context.with_metadata(source=source.uri)

            # Loop guard, before any I/O
            if is_derivative(source.key, self._config):
                return self._finish(
                    Skipped(reason=SkipReason.ALREADY_PROCESSED, source=source),
                    log_context,
                )

            fetched = self._run_stage(
                PipelineStage.FETCH,
                log_context,
                self._gateway.fetch,
                source.bucket,
                source.key,
            )
            payload = self._run_stage(
                PipelineStage.MATERIALIZE, log_context, materialize, fetched
            )
            dimensions = self._run_stage(
                PipelineStage.PROBE, log_context, self._codec.probe, payload.data
            )

            if not should_resize(dimensions, self._config.target_height):
                return self._finish(
                    Skipped(
                        reason=SkipReason.SOURCE_TOO_SMALL,
                        source=source,
                        detail=dimensions.height,
                    ),
                    log_context,
                )

            resized = self._run_stage(
                PipelineStage.TRANSFORM,
                log_context,
                self._codec.transform,
                payload.data,
                self._config.target_height,
            )
            destination = self._run_stage(
                PipelineStage.DERIVE,
                log_context,
                derive_destination,
                source,
                self._config,
            )
            self._run_stage(
                PipelineStage.STORE,
                log_context,
                self._gateway.store,
                destination.bucket,
                destination.key,
                resized,
                self._codec.output_content_type(payload.content_type),
                {
                    "source-bucket": source.bucket,
                    "source-key": quote(source.key),
                    "target-height": str(self._config.target_height),
                },
            )
            result: PipelineResult = Completed(
                source=source, derivative=destination, dimensions=dimensions
            )
        except StageFailure as failure:
            result = Failed.from_error(failure.stage, failure.error, source)

        return self._finish(result, log_context)

    def _run_stage(
        self,
        stage: PipelineStage,
        log_context: LogContext,
        func: Callable[..., T],
        *args: Any,
    ) -> T:
        self._logger.debug(f"Running {stage.value}", log_context.with_operation(stage.value))
        try:
            with record_operation(stage.value, self._metrics_collector):
                return func(*args)
        except Exception as e:
            raise StageFailure(stage, e) from e

    def _finish(self, result: PipelineResult, log_context: LogContext) -> PipelineResult:
        result_context = log_context.with_metadata(
            status=result.status, status_code=result.status_code
        )
        if isinstance(result, Failed):
            result_context = result_context.with_metadata(
                stage=result.stage.value, error_type=result.error_type
            )
            if result.status_code >= 500:
                self._logger.error(result.message, result_context)
            else:
                self._logger.warning(result.message, result_context)
        else:
            self._logger.info(result.message, result_context)
        return result
