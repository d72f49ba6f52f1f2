"""
Built-in span and log record processors.

The processor's exporter is resolved by the signal assembler and arrives
in the config under the 'exporter' key as a ready instance.
"""

from typing import Any, Dict, Optional

from opentelemetry.sdk._logs.export import (
    BatchLogRecordProcessor,
    SimpleLogRecordProcessor,
)
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor
from pydantic import Field

from ..exceptions import InvalidFieldCombinationError
from ..model.components import FrozenModel


class BatchProcessorConfig(FrozenModel):
    """Batch processor settings; durations are milliseconds."""

    exporter: Optional[Any] = None
    schedule_delay: Optional[int] = Field(default=None, ge=0)
    export_timeout: Optional[int] = Field(default=None, ge=0)
    max_queue_size: Optional[int] = Field(default=None, gt=0)
    max_export_batch_size: Optional[int] = Field(default=None, gt=0)


class SimpleProcessorConfig(FrozenModel):
    exporter: Optional[Any] = None


def _require_exporter(processor: str, exporter: Any) -> Any:
    if exporter is None:
        raise InvalidFieldCombinationError(f"{processor} processor requires an exporter")
    return exporter


def create_batch_span_processor(config: Dict[str, Any]) -> BatchSpanProcessor:
    settings = BatchProcessorConfig.model_validate(config)
    return BatchSpanProcessor(
        _require_exporter("batch", settings.exporter),
        max_queue_size=settings.max_queue_size,
        schedule_delay_millis=settings.schedule_delay,
        max_export_batch_size=settings.max_export_batch_size,
        export_timeout_millis=settings.export_timeout,
    )


def create_simple_span_processor(config: Dict[str, Any]) -> SimpleSpanProcessor:
    settings = SimpleProcessorConfig.model_validate(config)
    return SimpleSpanProcessor(_require_exporter("simple", settings.exporter))


def create_batch_log_record_processor(config: Dict[str, Any]) -> BatchLogRecordProcessor:
    settings = BatchProcessorConfig.model_validate(config)
    return BatchLogRecordProcessor(
        _require_exporter("batch", settings.exporter),
        schedule_delay_millis=settings.schedule_delay,
        max_export_batch_size=settings.max_export_batch_size,
        export_timeout_millis=settings.export_timeout,
        max_queue_size=settings.max_queue_size,
    )


def create_simple_log_record_processor(
    config: Dict[str, Any]
) -> SimpleLogRecordProcessor:
    settings = SimpleProcessorConfig.model_validate(config)
    return SimpleLogRecordProcessor(_require_exporter("simple", settings.exporter))
