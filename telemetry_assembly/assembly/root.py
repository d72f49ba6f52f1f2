"""
Root assembler: configuration document -> AssembledRuntime.

Stages run once, in order, never revisited:

    version check -> disabled short-circuit -> propagator -> resource
    -> logging -> tracing -> metering -> packaged runtime

The assembler owns one ResourceLedger per create() call. If any stage from
propagator resolution onward fails, the ledger is released in reverse order
before the error reaches the caller, so a caller never holds a half-built
runtime.
"""

import atexit
import logging
from typing import Any, Mapping, Optional, Union

from opentelemetry.sdk.resources import Resource

from ..config import AssemblyOptions
from ..exceptions import ConfigurationError, InvalidFieldCombinationError
from ..ledger import ResourceLedger
from ..model import ConfigurationDocument
from ..registry import CapabilityRegistry, get_capability_registry
from ..runtime import AssembledRuntime
from ..version import check_file_format
from .logs import LoggingAssembler
from .metering import MeteringAssembler
from .propagator import default_propagator, resolve_propagator
from .resource import resolve_resource
from .tracing import TracingAssembler

logger = logging.getLogger(__name__)

DocumentInput = Union[ConfigurationDocument, Mapping[str, Any]]


class TelemetryAssembler:
    """
    Builds telemetry runtimes from configuration documents.

    Usage:
        assembler = TelemetryAssembler()
        runtime = assembler.create({
            "file_format": "1.0",
            "tracer_provider": {
                "processors": [{"batch": {"exporter": {"otlp_http": {}}}}],
            },
        })
        ...
        runtime.shutdown()
    """

    def __init__(
        self,
        registry: Optional[CapabilityRegistry] = None,
        options: Optional[AssemblyOptions] = None,
    ):
        self.registry = registry if registry is not None else get_capability_registry()
        self.options = options or AssemblyOptions()
        self.options.validate()

    def create(self, document: DocumentInput) -> AssembledRuntime:
        """
        Assemble a runtime from a document.

        Args:
            document: ConfigurationDocument or an already-parsed mapping

        Returns:
            AssembledRuntime owning everything it created

        Raises:
            DocumentParseError: If a mapping does not fit the document schema
            UnsupportedSchemaVersionError: If file_format is missing or unsupported
            UnknownProviderError: If a referenced component is not registered
            InvalidFieldCombinationError: If a component rejects its configuration
        """
        if not isinstance(document, ConfigurationDocument):
            document = ConfigurationDocument.from_dict(document)

        check_file_format(document.file_format)
        logger.debug(f"Accepted file format {document.file_format}")

        if document.disabled is True:
            logger.info("Telemetry disabled by configuration, returning inert runtime")
            return self._inert_runtime()

        ledger = ResourceLedger()
        try:
            propagator = resolve_propagator(document.propagator, self.registry, ledger)
            logger.debug("Propagator resolved")

            resource = resolve_resource(document.resource, self.registry, ledger)
            logger.debug("Resource resolved")

            logger_provider = LoggingAssembler(self.registry, ledger).assemble(
                document.logger_provider, document.attribute_limits, resource
            )
            tracer_provider = TracingAssembler(self.registry, ledger).assemble(
                document.tracer_provider, document.attribute_limits, resource
            )
            meter_provider = MeteringAssembler(self.registry, ledger).assemble(
                document.meter_provider, document.attribute_limits, resource
            )
        except Exception as e:
            self._abort(e, ledger)

        runtime = AssembledRuntime(
            propagator=propagator,
            resource=resource,
            tracer_provider=tracer_provider,
            meter_provider=meter_provider,
            logger_provider=logger_provider,
            ledger=ledger,
            flush_timeout_millis=self.options.flush_timeout_millis,
        )
        self._install(runtime)
        logger.info(f"Assembled {runtime!r} holding {len(ledger)} resource(s)")
        return runtime

    def _inert_runtime(self) -> AssembledRuntime:
        ledger = ResourceLedger()
        return AssembledRuntime(
            propagator=default_propagator(),
            resource=Resource.get_empty(),
            tracer_provider=TracingAssembler(self.registry, ledger).noop_provider(),
            meter_provider=MeteringAssembler(self.registry, ledger).noop_provider(),
            logger_provider=LoggingAssembler(self.registry, ledger).noop_provider(),
            ledger=ledger,
            flush_timeout_millis=self.options.flush_timeout_millis,
        )

    def _abort(self, error: Exception, ledger: ResourceLedger) -> None:
        """Release everything acquired so far, then re-raise error."""
        held = len(ledger)
        release_error = ledger.release_all()
        logger.error(f"Telemetry assembly failed, released {held} resource(s): {error}")
        if release_error is not None:
            logger.warning(f"Teardown after failed assembly also failed: {release_error}")

        if isinstance(error, ConfigurationError):
            error.release_error = release_error
            raise error

        wrapped = InvalidFieldCombinationError(f"Telemetry assembly failed: {error}")
        wrapped.release_error = release_error
        raise wrapped from error

    def _install(self, runtime: AssembledRuntime) -> None:
        if self.options.activate_global:
            runtime.activate_global()
        if self.options.shutdown_on_exit:
            atexit.register(runtime.shutdown)


def create(
    document: DocumentInput,
    registry: Optional[CapabilityRegistry] = None,
    options: Optional[AssemblyOptions] = None,
) -> AssembledRuntime:
    """
    Assemble a telemetry runtime from a configuration document.

    Convenience wrapper around TelemetryAssembler(registry, options).create().
    """
    return TelemetryAssembler(registry, options).create(document)
