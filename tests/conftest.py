"""Shared fixtures for telemetry assembly tests"""

from typing import Any, Dict, List

import pytest
from opentelemetry.propagators.textmap import TextMapPropagator
from opentelemetry.sdk.resources import Resource

from telemetry_assembly.components import register_builtin_components
from telemetry_assembly.registry import CapabilityRegistry, CapabilityType


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: assembles real SDK pipelines end to end"
    )
    config.addinivalue_line("markers", "telemetry: exercises OpenTelemetry SDK objects")


class ShutdownLog:
    """Records the order in which fake components are shut down."""

    def __init__(self):
        self.events: List[str] = []
        self.components: List["RecordingComponent"] = []

    def record(self, label: str) -> None:
        self.events.append(label)


class RecordingComponent:
    """
    Fake pipeline stage with a shutdown() that records its first call.

    Works as a span/log exporter, span/log processor or metric exporter
    stand-in: every hook the SDK may call is present and inert. Like the SDK
    processors, the first shutdown also shuts down a nested exporter.
    """

    def __init__(self, label: str, log: ShutdownLog, config: Dict[str, Any] = None):
        self.label = label
        self.log = log
        self.config = dict(config or {})
        self.shutdown_calls = 0
        log.components.append(self)

    def shutdown(self, *args, **kwargs):
        self.shutdown_calls += 1
        if self.shutdown_calls > 1:
            return
        self.log.record(self.label)
        exporter = self.config.get("exporter")
        if callable(getattr(exporter, "shutdown", None)):
            exporter.shutdown()

    def force_flush(self, *args, **kwargs):
        return True

    def export(self, *args, **kwargs):
        return None

    def on_start(self, *args, **kwargs):
        pass

    def on_end(self, *args, **kwargs):
        pass

    def on_emit(self, *args, **kwargs):
        pass

    def emit(self, *args, **kwargs):
        pass


class RecordingPropagator(TextMapPropagator):
    """Propagator that owns something and therefore has a shutdown()."""

    def __init__(self, log: ShutdownLog):
        self.log = log

    def extract(self, carrier, context=None, getter=None):
        return context

    def inject(self, carrier, context=None, setter=None):
        pass

    @property
    def fields(self):
        return set()

    def shutdown(self):
        self.log.record("propagator")


class RecordingDetector:
    """Resource detector with a shutdown()."""

    def __init__(self, log: ShutdownLog, attributes: Dict[str, Any] = None):
        self.log = log
        self.attributes = attributes or {}

    def detect(self) -> Resource:
        return Resource(self.attributes)

    def shutdown(self):
        self.log.record("resource_detector")


@pytest.fixture
def shutdown_log():
    """Fresh shutdown order recorder."""
    return ShutdownLog()


@pytest.fixture
def registry():
    """Registry holding only the built-in components."""
    registry = CapabilityRegistry()
    register_builtin_components(registry)
    return registry


@pytest.fixture
def recording_registry(registry, shutdown_log):
    """
    Built-in registry plus 'recording' components for every pipeline stage.

    Each recording component records its label in shutdown_log when it is
    first shut down.
    """

    def recording(label):
        return lambda config: RecordingComponent(label, shutdown_log, config)

    registry.register(CapabilityType.SPAN_EXPORTER, "recording", recording("span_exporter"))
    registry.register(
        CapabilityType.SPAN_PROCESSOR, "recording", recording("span_processor")
    )
    registry.register(
        CapabilityType.LOG_RECORD_EXPORTER, "recording", recording("log_record_exporter")
    )
    registry.register(
        CapabilityType.LOG_RECORD_PROCESSOR, "recording", recording("log_record_processor")
    )
    registry.register(
        CapabilityType.METRIC_EXPORTER, "recording", recording("metric_exporter")
    )
    registry.register(
        CapabilityType.PROPAGATOR,
        "recording",
        lambda config: RecordingPropagator(shutdown_log),
    )
    registry.register(
        CapabilityType.RESOURCE_DETECTOR,
        "recording",
        lambda config: RecordingDetector(shutdown_log, config.get("attributes")),
    )
    return registry
