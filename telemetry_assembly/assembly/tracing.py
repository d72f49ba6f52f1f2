"""
Tracer provider assembly.
"""

import logging
from typing import Any, Dict, Optional

from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import SpanLimits, TracerProvider
from opentelemetry.sdk.trace.sampling import ALWAYS_ON, ParentBased, Sampler
from opentelemetry.trace import NoOpTracerProvider

from ..components.samplers import PARENT_BASED_KEYS
from ..model import ComponentSpec, TracerProviderModel
from ..registry import CapabilityType
from .base import SignalAssembler

logger = logging.getLogger(__name__)

SAMPLER_NESTING = {key: CapabilityType.SAMPLER for key in PARENT_BASED_KEYS}
PROCESSOR_NESTING = {"exporter": CapabilityType.SPAN_EXPORTER}


def build_span_limits(limits: Dict[str, int]) -> SpanLimits:
    """Map merged document limits onto SDK SpanLimits; unset fields use SDK defaults."""
    return SpanLimits(
        max_attributes=limits.get("attribute_count_limit"),
        max_attribute_length=limits.get("attribute_value_length_limit"),
        max_events=limits.get("event_count_limit"),
        max_links=limits.get("link_count_limit"),
        max_event_attributes=limits.get("event_attribute_count_limit"),
        max_link_attributes=limits.get("link_attribute_count_limit"),
    )


class TracingAssembler(SignalAssembler):
    signal = "tracing"

    def noop_provider(self) -> Any:
        return NoOpTracerProvider()

    def build(
        self, section: TracerProviderModel, limits: Dict[str, int], resource: Resource
    ) -> TracerProvider:
        sampler = self._resolve_sampler(section.sampler)
        processors = [
            self.resolve_stage(CapabilityType.SPAN_PROCESSOR, component, PROCESSOR_NESTING)
            for component in section.processors
        ]
        self.pipeline = processors

        provider = TracerProvider(
            sampler=sampler,
            resource=resource,
            span_limits=build_span_limits(limits),
            shutdown_on_exit=False,
        )
        for processor in processors:
            provider.add_span_processor(processor)

        logger.debug(
            f"Tracer provider uses sampler {type(sampler).__name__} "
            f"with {len(processors)} processor(s)"
        )
        return provider

    def _resolve_sampler(self, component: Optional[ComponentSpec]) -> Sampler:
        if component is None:
            return ParentBased(ALWAYS_ON)
        return self.resolve_stage(CapabilityType.SAMPLER, component, SAMPLER_NESTING)
