"""
Built-in metric readers and view aggregations.
"""

from typing import Any, Dict, List, Optional

from opentelemetry.sdk.metrics.export import MetricReader, PeriodicExportingMetricReader
from opentelemetry.sdk.metrics.view import (
    Aggregation,
    DefaultAggregation,
    DropAggregation,
    ExplicitBucketHistogramAggregation,
    ExponentialBucketHistogramAggregation,
    LastValueAggregation,
    SumAggregation,
)
from pydantic import Field

from ..exceptions import InvalidFieldCombinationError
from ..model.components import EmptyConfig, FrozenModel


class PeriodicReaderConfig(FrozenModel):
    """Periodic reader settings; durations are milliseconds."""

    exporter: Optional[Any] = None
    interval: Optional[int] = Field(default=None, gt=0)
    timeout: Optional[int] = Field(default=None, ge=0)


class PullReaderConfig(FrozenModel):
    exporter: Optional[Any] = None


class ExplicitBucketHistogramConfig(FrozenModel):
    boundaries: Optional[List[float]] = None
    record_min_max: bool = True


class Base2ExponentialHistogramConfig(FrozenModel):
    max_size: int = Field(default=160, gt=1)
    max_scale: int = Field(default=20, ge=-10, le=20)


def create_periodic_reader(config: Dict[str, Any]) -> PeriodicExportingMetricReader:
    settings = PeriodicReaderConfig.model_validate(config)
    if settings.exporter is None:
        raise InvalidFieldCombinationError("periodic reader requires an exporter")
    return PeriodicExportingMetricReader(
        settings.exporter,
        export_interval_millis=settings.interval,
        export_timeout_millis=settings.timeout,
    )


def create_pull_reader(config: Dict[str, Any]) -> MetricReader:
    """
    Pull readers are exporters that are themselves metric readers
    (e.g. a Prometheus reader registered as a metric_exporter).
    """
    settings = PullReaderConfig.model_validate(config)
    if not isinstance(settings.exporter, MetricReader):
        raise InvalidFieldCombinationError(
            f"pull reader requires an exporter that is a MetricReader, "
            f"got {type(settings.exporter).__name__}"
        )
    return settings.exporter


def create_default_aggregation(config: Dict[str, Any]) -> Aggregation:
    EmptyConfig.model_validate(config)
    return DefaultAggregation()


def create_drop_aggregation(config: Dict[str, Any]) -> Aggregation:
    EmptyConfig.model_validate(config)
    return DropAggregation()


def create_sum_aggregation(config: Dict[str, Any]) -> Aggregation:
    EmptyConfig.model_validate(config)
    return SumAggregation()


def create_last_value_aggregation(config: Dict[str, Any]) -> Aggregation:
    EmptyConfig.model_validate(config)
    return LastValueAggregation()


def create_explicit_bucket_histogram(config: Dict[str, Any]) -> Aggregation:
    settings = ExplicitBucketHistogramConfig.model_validate(config)
    if settings.boundaries is None:
        return ExplicitBucketHistogramAggregation(record_min_max=settings.record_min_max)
    return ExplicitBucketHistogramAggregation(
        boundaries=settings.boundaries, record_min_max=settings.record_min_max
    )


def create_base2_exponential_histogram(config: Dict[str, Any]) -> Aggregation:
    settings = Base2ExponentialHistogramConfig.model_validate(config)
    return ExponentialBucketHistogramAggregation(
        max_size=settings.max_size, max_scale=settings.max_scale
    )
