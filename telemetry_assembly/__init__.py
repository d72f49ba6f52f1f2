"""
Telemetry Assembly

Builds a ready-to-use OpenTelemetry runtime (propagator, resource, tracer,
meter and logger providers) from a declarative configuration document.

Usage:
    from telemetry_assembly import create

    runtime = create({
        "file_format": "1.0",
        "resource": {"attributes": [{"name": "service.name", "value": "checkout"}]},
        "tracer_provider": {
            "processors": [{"batch": {"exporter": {"otlp_http": {}}}}],
        },
    })
    tracer = runtime.tracer_provider.get_tracer(__name__)
    ...
    runtime.shutdown()
"""

from .assembly import TelemetryAssembler, create
from .config import AssemblyOptions
from .exceptions import (
    ConfigurationError,
    DocumentParseError,
    ErrorKind,
    InvalidFieldCombinationError,
    ProviderRegistrationError,
    ResourceReleaseError,
    UnknownProviderError,
    UnsupportedSchemaVersionError,
)
from .ledger import ResourceLedger
from .model import ConfigurationDocument
from .registry import (
    CapabilityRegistry,
    CapabilityType,
    get_capability_registry,
    register_component,
)
from .runtime import AssembledRuntime
from .version import check_file_format, is_supported_file_format

__version__ = "0.1.0"

__all__ = [
    # Assembly
    "create",
    "TelemetryAssembler",
    "AssembledRuntime",
    "AssemblyOptions",
    "ConfigurationDocument",
    # Registry
    "CapabilityRegistry",
    "CapabilityType",
    "get_capability_registry",
    "register_component",
    # Lifecycle
    "ResourceLedger",
    # Version gate
    "check_file_format",
    "is_supported_file_format",
    # Errors
    "ConfigurationError",
    "ErrorKind",
    "UnsupportedSchemaVersionError",
    "UnknownProviderError",
    "InvalidFieldCombinationError",
    "DocumentParseError",
    "ResourceReleaseError",
    "ProviderRegistrationError",
]
