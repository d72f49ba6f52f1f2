"""
The assembled telemetry runtime handed back to callers.
"""

import logging
from typing import Any, Dict, Optional

from opentelemetry import metrics, propagate, trace
from opentelemetry._logs import set_logger_provider
from opentelemetry.propagators.textmap import TextMapPropagator
from opentelemetry.sdk.resources import Resource

from .config import DEFAULT_FLUSH_TIMEOUT_MILLIS
from .exceptions import ResourceReleaseError
from .ledger import ResourceLedger

logger = logging.getLogger(__name__)


class AssembledRuntime:
    """
    Propagator, resource and the three signal providers built from one
    configuration document.

    Unconfigured signals hold no-op providers. Every shutdown-bearing object
    created during assembly is owned by the runtime's ledger, and shutdown()
    releases them in reverse construction order.

    Usage:
        with create(document) as runtime:
            tracer = runtime.tracer_provider.get_tracer(__name__)
            with tracer.start_as_current_span("work"):
                ...
    """

    def __init__(
        self,
        propagator: TextMapPropagator,
        resource: Resource,
        tracer_provider: Any,
        meter_provider: Any,
        logger_provider: Any,
        ledger: ResourceLedger,
        flush_timeout_millis: int = DEFAULT_FLUSH_TIMEOUT_MILLIS,
    ):
        self.propagator = propagator
        self.resource = resource
        self.tracer_provider = tracer_provider
        self.meter_provider = meter_provider
        self.logger_provider = logger_provider
        self._ledger = ledger
        self._flush_timeout_millis = flush_timeout_millis

    @property
    def is_shutdown(self) -> bool:
        return self._ledger.released

    def shutdown(self) -> Optional[ResourceReleaseError]:
        """
        Shut down everything acquired during assembly.

        Safe to call more than once (e.g. explicitly and from an exit hook);
        only the first call releases anything.

        Returns:
            ResourceReleaseError if any release failed, else None
        """
        if self._ledger.released:
            logger.debug("Telemetry runtime already shut down")
            return None

        error = self._ledger.release_all()
        if error is not None:
            logger.warning(f"Telemetry runtime shut down with errors: {error}")
        else:
            logger.info("Telemetry runtime shut down")
        return error

    def force_flush(self, timeout_millis: Optional[int] = None) -> bool:
        """
        Force flush every provider that supports it.

        Args:
            timeout_millis: Per-provider timeout; defaults to the assembly option

        Returns:
            True if all flushes succeeded, False otherwise
        """
        if self.is_shutdown:
            logger.warning("Cannot flush a telemetry runtime that has been shut down")
            return False

        timeout = timeout_millis or self._flush_timeout_millis
        all_success = True
        for signal, provider in self._providers().items():
            if not hasattr(provider, "force_flush"):
                continue
            try:
                if not provider.force_flush(timeout_millis=timeout):
                    logger.warning(f"Force flush failed for {signal} provider")
                    all_success = False
            except Exception as e:
                logger.error(f"Error flushing {signal} provider: {e}")
                all_success = False
        return all_success

    def activate_global(self) -> None:
        """Install the providers and propagator as the OpenTelemetry globals."""
        trace.set_tracer_provider(self.tracer_provider)
        metrics.set_meter_provider(self.meter_provider)
        set_logger_provider(self.logger_provider)
        propagate.set_global_textmap(self.propagator)
        logger.info("Activated assembled telemetry runtime as global default")

    def _providers(self) -> Dict[str, Any]:
        return {
            "logging": self.logger_provider,
            "tracing": self.tracer_provider,
            "metering": self.meter_provider,
        }

    def __enter__(self) -> "AssembledRuntime":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()

    def __repr__(self) -> str:
        providers = ", ".join(
            f"{signal}={type(provider).__name__}"
            for signal, provider in self._providers().items()
        )
        return f"AssembledRuntime({providers}, shutdown={self.is_shutdown})"
