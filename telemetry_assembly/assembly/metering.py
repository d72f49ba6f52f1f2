"""
Meter provider assembly.

Metric readers own their exporters, views map document selectors and
streams onto SDK views. The SDK meter provider has no attribute-limit
setting, so merged attribute limits do not apply to metering.
"""

import logging
from typing import Any, Dict

from opentelemetry.metrics import NoOpMeterProvider
from opentelemetry.sdk.metrics import (
    AlwaysOffExemplarFilter,
    AlwaysOnExemplarFilter,
    Counter,
    Histogram,
    MeterProvider,
    ObservableCounter,
    ObservableGauge,
    ObservableUpDownCounter,
    TraceBasedExemplarFilter,
    UpDownCounter,
)
from opentelemetry.sdk.metrics.view import View
from opentelemetry.sdk.resources import Resource

from ..exceptions import InvalidFieldCombinationError
from ..model import MeterProviderModel, ViewModel
from ..registry import CapabilityType
from .base import SignalAssembler

logger = logging.getLogger(__name__)

READER_NESTING = {"exporter": CapabilityType.METRIC_EXPORTER}

INSTRUMENT_TYPES = {
    "counter": Counter,
    "up_down_counter": UpDownCounter,
    "histogram": Histogram,
    "observable_counter": ObservableCounter,
    "observable_gauge": ObservableGauge,
    "observable_up_down_counter": ObservableUpDownCounter,
}

EXEMPLAR_FILTERS = {
    "trace_based": TraceBasedExemplarFilter,
    "always_on": AlwaysOnExemplarFilter,
    "always_off": AlwaysOffExemplarFilter,
}


class MeteringAssembler(SignalAssembler):
    signal = "metering"

    def noop_provider(self) -> Any:
        return NoOpMeterProvider()

    def build(
        self, section: MeterProviderModel, limits: Dict[str, int], resource: Resource
    ) -> MeterProvider:
        readers = [
            self.resolve_stage(CapabilityType.METRIC_READER, component, READER_NESTING)
            for component in section.readers
        ]
        self.pipeline = readers
        views = [self._build_view(index, view) for index, view in enumerate(section.views)]

        exemplar_filter = None
        if section.exemplar_filter is not None:
            exemplar_filter = EXEMPLAR_FILTERS[section.exemplar_filter]()

        logger.debug(
            f"Meter provider uses {len(readers)} reader(s) and {len(views)} view(s)"
        )
        return MeterProvider(
            metric_readers=readers,
            resource=resource,
            views=views,
            exemplar_filter=exemplar_filter,
            shutdown_on_exit=False,
        )

    def _build_view(self, index: int, view: ViewModel) -> View:
        selector, stream = view.selector, view.stream

        attribute_keys = None
        if stream.attribute_keys is not None:
            if stream.attribute_keys.excluded:
                raise InvalidFieldCombinationError(
                    f"views[{index}]: attribute_keys.excluded is not supported, "
                    f"list the attributes to keep under attribute_keys.included"
                )
            if stream.attribute_keys.included is not None:
                attribute_keys = set(stream.attribute_keys.included)

        aggregation = None
        if stream.aggregation is not None:
            aggregation = self.resolve_stage(CapabilityType.AGGREGATION, stream.aggregation)

        instrument_type = None
        if selector.instrument_type is not None:
            instrument_type = INSTRUMENT_TYPES[selector.instrument_type]

        try:
            return View(
                instrument_type=instrument_type,
                instrument_name=selector.instrument_name,
                instrument_unit=selector.unit,
                meter_name=selector.meter_name,
                meter_version=selector.meter_version,
                meter_schema_url=selector.meter_schema_url,
                name=stream.name,
                description=stream.description,
                attribute_keys=attribute_keys,
                aggregation=aggregation,
            )
        except Exception as e:
            raise InvalidFieldCombinationError(f"views[{index}]: {e}") from e
