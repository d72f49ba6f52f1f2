"""
Per-signal sections of the configuration document.
"""

from typing import List, Literal, Optional

from pydantic import Field

from .components import ComponentSpec, FrozenModel


class AttributeLimitsModel(FrozenModel):
    """Attribute limits shared by every signal unless overridden."""

    attribute_value_length_limit: Optional[int] = Field(default=None, ge=0)
    attribute_count_limit: Optional[int] = Field(default=None, ge=0)


class SpanLimitsModel(AttributeLimitsModel):
    """Tracer provider limits; the shared fields override attribute_limits."""

    event_count_limit: Optional[int] = Field(default=None, ge=0)
    link_count_limit: Optional[int] = Field(default=None, ge=0)
    event_attribute_count_limit: Optional[int] = Field(default=None, ge=0)
    link_attribute_count_limit: Optional[int] = Field(default=None, ge=0)


class LogRecordLimitsModel(AttributeLimitsModel):
    """Logger provider limits."""

    pass


class TracerProviderModel(FrozenModel):
    processors: List[ComponentSpec] = Field(default_factory=list)
    limits: Optional[SpanLimitsModel] = None
    sampler: Optional[ComponentSpec] = None


class LoggerProviderModel(FrozenModel):
    processors: List[ComponentSpec] = Field(default_factory=list)
    limits: Optional[LogRecordLimitsModel] = None


InstrumentType = Literal[
    "counter",
    "up_down_counter",
    "histogram",
    "observable_counter",
    "observable_gauge",
    "observable_up_down_counter",
]


class ViewSelectorModel(FrozenModel):
    """Criteria selecting the instruments a view applies to."""

    instrument_name: Optional[str] = None
    instrument_type: Optional[InstrumentType] = None
    unit: Optional[str] = None
    meter_name: Optional[str] = None
    meter_version: Optional[str] = None
    meter_schema_url: Optional[str] = None


class AttributeKeysModel(FrozenModel):
    included: Optional[List[str]] = None
    excluded: Optional[List[str]] = None


class ViewStreamModel(FrozenModel):
    """How selected instruments are reported."""

    name: Optional[str] = None
    description: Optional[str] = None
    aggregation: Optional[ComponentSpec] = None
    attribute_keys: Optional[AttributeKeysModel] = None


class ViewModel(FrozenModel):
    selector: ViewSelectorModel = Field(default_factory=ViewSelectorModel)
    stream: ViewStreamModel = Field(default_factory=ViewStreamModel)


class MeterProviderModel(FrozenModel):
    readers: List[ComponentSpec] = Field(default_factory=list)
    views: List[ViewModel] = Field(default_factory=list)
    exemplar_filter: Optional[Literal["trace_based", "always_on", "always_off"]] = None
