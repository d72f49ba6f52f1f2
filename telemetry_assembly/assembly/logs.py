"""
Logger provider assembly.

The SDK logger provider takes no attribute limits, so merged limits are
enforced by wrapping each resolved processor: the wrapper bounds a record's
attributes before handing the record on.
"""

import logging
from typing import Any, Dict, Optional

from opentelemetry._logs import NoOpLoggerProvider
from opentelemetry.attributes import BoundedAttributes
from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk.resources import Resource

from ..model import LoggerProviderModel
from ..registry import CapabilityType
from .base import SignalAssembler

logger = logging.getLogger(__name__)

PROCESSOR_NESTING = {"exporter": CapabilityType.LOG_RECORD_EXPORTER}


class LimitingLogRecordProcessor:
    """
    Log record processor that applies attribute limits, then delegates.

    Attributes beyond max_attributes are dropped and string values longer
    than max_attribute_length are truncated. None means unbounded.
    """

    def __init__(
        self,
        delegate: Any,
        max_attributes: Optional[int] = None,
        max_attribute_length: Optional[int] = None,
    ):
        self.delegate = delegate
        self.max_attributes = max_attributes
        self.max_attribute_length = max_attribute_length
        # Older SDK processors only expose emit()
        self._forward = getattr(delegate, "on_emit", None) or delegate.emit

    def on_emit(self, log_data: Any) -> None:
        # LogData and ReadWriteLogRecord both carry the record as .log_record
        record = getattr(log_data, "log_record", log_data)
        if record.attributes:
            record.attributes = BoundedAttributes(
                maxlen=self.max_attributes,
                attributes=record.attributes,
                immutable=False,
                max_value_len=self.max_attribute_length,
            )
        self._forward(log_data)

    emit = on_emit

    def shutdown(self) -> None:
        self.delegate.shutdown()

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return self.delegate.force_flush(timeout_millis)

    def __repr__(self) -> str:
        return (
            f"LimitingLogRecordProcessor({self.delegate!r}, "
            f"max_attributes={self.max_attributes}, "
            f"max_attribute_length={self.max_attribute_length})"
        )


class LoggingAssembler(SignalAssembler):
    signal = "logging"

    def noop_provider(self) -> Any:
        return NoOpLoggerProvider()

    def build(
        self, section: LoggerProviderModel, limits: Dict[str, int], resource: Resource
    ) -> LoggerProvider:
        processors = [
            self.resolve_stage(
                CapabilityType.LOG_RECORD_PROCESSOR, component, PROCESSOR_NESTING
            )
            for component in section.processors
        ]
        self.pipeline = processors

        max_attributes = limits.get("attribute_count_limit")
        max_attribute_length = limits.get("attribute_value_length_limit")

        provider = LoggerProvider(resource=resource, shutdown_on_exit=False)
        for processor in processors:
            if max_attributes is not None or max_attribute_length is not None:
                processor = LimitingLogRecordProcessor(
                    processor, max_attributes, max_attribute_length
                )
            provider.add_log_record_processor(processor)

        logger.debug(
            f"Logger provider uses {len(processors)} processor(s), "
            f"attribute limits {limits or 'SDK defaults'}"
        )
        return provider
