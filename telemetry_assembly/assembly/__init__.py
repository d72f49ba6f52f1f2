"""
Assemblers turning a configuration document into live telemetry objects.
"""

from .base import SignalAssembler, merge_limits
from .logs import LoggingAssembler
from .metering import MeteringAssembler
from .propagator import default_propagator, resolve_propagator
from .resource import resolve_resource
from .root import TelemetryAssembler, create
from .tracing import TracingAssembler

__all__ = [
    "create",
    "TelemetryAssembler",
    "SignalAssembler",
    "LoggingAssembler",
    "TracingAssembler",
    "MeteringAssembler",
    "merge_limits",
    "default_propagator",
    "resolve_propagator",
    "resolve_resource",
]
