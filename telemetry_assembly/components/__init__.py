"""
Built-in components, registered under their document names.

The default registry returned by get_capability_registry() registers these
on first access. A custom CapabilityRegistry starts empty; call
register_builtin_components() on it to get the same set.
"""

import logging
from typing import Callable, Dict, Tuple

from ..registry import CapabilityRegistry, CapabilityType
from . import detectors, exporters, metrics, processors, propagators, samplers

logger = logging.getLogger(__name__)

BUILTIN_COMPONENTS: Dict[Tuple[CapabilityType, str], Callable] = {
    (CapabilityType.PROPAGATOR, "tracecontext"): propagators.create_tracecontext,
    (CapabilityType.PROPAGATOR, "baggage"): propagators.create_baggage,
    (CapabilityType.PROPAGATOR, "b3"): propagators.create_b3,
    (CapabilityType.PROPAGATOR, "b3multi"): propagators.create_b3multi,
    (CapabilityType.PROPAGATOR, "none"): propagators.create_none,
    (CapabilityType.RESOURCE_DETECTOR, "process"): detectors.create_process_detector,
    (CapabilityType.SAMPLER, "always_on"): samplers.create_always_on,
    (CapabilityType.SAMPLER, "always_off"): samplers.create_always_off,
    (CapabilityType.SAMPLER, "trace_id_ratio_based"): samplers.create_trace_id_ratio_based,
    (CapabilityType.SAMPLER, "parent_based"): samplers.create_parent_based,
    (CapabilityType.SPAN_EXPORTER, "otlp_http"): exporters.create_otlp_http_span_exporter,
    (CapabilityType.SPAN_EXPORTER, "otlp_grpc"): exporters.create_otlp_grpc_span_exporter,
    (CapabilityType.SPAN_EXPORTER, "console"): exporters.create_console_span_exporter,
    (CapabilityType.LOG_RECORD_EXPORTER, "otlp_http"): exporters.create_otlp_http_log_exporter,
    (CapabilityType.LOG_RECORD_EXPORTER, "otlp_grpc"): exporters.create_otlp_grpc_log_exporter,
    (CapabilityType.LOG_RECORD_EXPORTER, "console"): exporters.create_console_log_exporter,
    (CapabilityType.METRIC_EXPORTER, "otlp_http"): exporters.create_otlp_http_metric_exporter,
    (CapabilityType.METRIC_EXPORTER, "otlp_grpc"): exporters.create_otlp_grpc_metric_exporter,
    (CapabilityType.METRIC_EXPORTER, "console"): exporters.create_console_metric_exporter,
    (CapabilityType.SPAN_PROCESSOR, "batch"): processors.create_batch_span_processor,
    (CapabilityType.SPAN_PROCESSOR, "simple"): processors.create_simple_span_processor,
    (CapabilityType.LOG_RECORD_PROCESSOR, "batch"): processors.create_batch_log_record_processor,
    (CapabilityType.LOG_RECORD_PROCESSOR, "simple"): processors.create_simple_log_record_processor,
    (CapabilityType.METRIC_READER, "periodic"): metrics.create_periodic_reader,
    (CapabilityType.METRIC_READER, "pull"): metrics.create_pull_reader,
    (CapabilityType.AGGREGATION, "default"): metrics.create_default_aggregation,
    (CapabilityType.AGGREGATION, "drop"): metrics.create_drop_aggregation,
    (CapabilityType.AGGREGATION, "sum"): metrics.create_sum_aggregation,
    (CapabilityType.AGGREGATION, "last_value"): metrics.create_last_value_aggregation,
    (CapabilityType.AGGREGATION, "explicit_bucket_histogram"): metrics.create_explicit_bucket_histogram,
    (CapabilityType.AGGREGATION, "base2_exponential_bucket_histogram"): metrics.create_base2_exponential_histogram,
}


def register_builtin_components(registry: CapabilityRegistry) -> None:
    """
    Register every built-in component on a registry.

    Raises:
        ProviderRegistrationError: If a built-in name is already taken
    """
    for (capability_type, name), factory in BUILTIN_COMPONENTS.items():
        registry.register(capability_type, name, factory)
    logger.info(f"Registered {len(BUILTIN_COMPONENTS)} built-in telemetry components")
