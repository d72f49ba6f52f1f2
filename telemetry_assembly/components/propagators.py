"""
Built-in text map propagators.
"""

from typing import Any, Dict

from opentelemetry.baggage.propagation import W3CBaggagePropagator
from opentelemetry.propagators.b3 import B3MultiFormat, B3SingleFormat
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.propagators.textmap import TextMapPropagator
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from ..exceptions import InvalidFieldCombinationError


def _reject_config(name: str, config: Dict[str, Any]) -> None:
    if config:
        raise InvalidFieldCombinationError(
            f"Propagator '{name}' takes no configuration, got {sorted(config)}"
        )


def create_tracecontext(config: Dict[str, Any]) -> TextMapPropagator:
    _reject_config("tracecontext", config)
    return TraceContextTextMapPropagator()


def create_baggage(config: Dict[str, Any]) -> TextMapPropagator:
    _reject_config("baggage", config)
    return W3CBaggagePropagator()


def create_b3(config: Dict[str, Any]) -> TextMapPropagator:
    """B3 propagator injecting the single 'b3' header."""
    _reject_config("b3", config)
    return B3SingleFormat()


def create_b3multi(config: Dict[str, Any]) -> TextMapPropagator:
    """B3 propagator injecting the X-B3-* header set."""
    _reject_config("b3multi", config)
    return B3MultiFormat()


def create_none(config: Dict[str, Any]) -> TextMapPropagator:
    _reject_config("none", config)
    return CompositePropagator([])
