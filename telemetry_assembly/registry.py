"""
Capability registry for pluggable telemetry components.

Factories are registered under a (capability type, name) key by external
collaborators before assembly runs. Assembly only resolves; it never
registers or discovers.

Third-party packages can advertise factories through entry points, one
group per capability type:

    [project.entry-points."telemetry_assembly.span_exporter"]
    zipkin = "my_package.exporters:create_zipkin_exporter"

Those are registered only when a collaborator calls load_entry_points().
"""

import importlib.metadata
import logging
import threading
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .exceptions import (
    ConfigurationError,
    InvalidFieldCombinationError,
    ProviderRegistrationError,
    UnknownProviderError,
)

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP_PREFIX = "telemetry_assembly."

Factory = Callable[[Dict[str, Any]], Any]


class CapabilityType(Enum):
    """Extension point categories a factory can be registered under."""

    PROPAGATOR = "propagator"
    RESOURCE_DETECTOR = "resource_detector"
    SAMPLER = "sampler"
    SPAN_EXPORTER = "span_exporter"
    SPAN_PROCESSOR = "span_processor"
    LOG_RECORD_EXPORTER = "log_record_exporter"
    LOG_RECORD_PROCESSOR = "log_record_processor"
    METRIC_EXPORTER = "metric_exporter"
    METRIC_READER = "metric_reader"
    AGGREGATION = "aggregation"


class CapabilityRegistry:
    """
    Registry mapping (capability type, name) to a component factory.

    A factory takes the component's config dict and returns the component
    instance. The registry holds no lifecycle responsibility: whatever a
    factory creates is owned by the caller of resolve().

    Usage:
        registry = CapabilityRegistry()
        registry.register(CapabilityType.SPAN_EXPORTER, "noop", lambda config: NoopExporter())
        exporter = registry.resolve(CapabilityType.SPAN_EXPORTER, "noop", {})
    """

    def __init__(self):
        self._factories: Dict[Tuple[CapabilityType, str], Factory] = {}
        self._lock = threading.RLock()

    def register(
        self, capability_type: CapabilityType, name: str, factory: Factory
    ) -> None:
        """
        Register a factory.

        Args:
            capability_type: Extension point the factory implements
            name: Name documents use to reference it (e.g., "otlp_http")
            factory: Callable taking the component config dict

        Raises:
            ProviderRegistrationError: If the key is already registered
        """
        key = (capability_type, name)
        with self._lock:
            if key in self._factories:
                raise ProviderRegistrationError(
                    f"A {capability_type.value} provider named '{name}' is already "
                    f"registered ({self._factories[key]!r})"
                )
            self._factories[key] = factory
        logger.debug(f"Registered {capability_type.value} provider: {name}")

    def unregister(self, capability_type: CapabilityType, name: str) -> None:
        """Remove a factory if present."""
        with self._lock:
            self._factories.pop((capability_type, name), None)

    def resolve(
        self,
        capability_type: CapabilityType,
        name: str,
        config: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """
        Look up a factory and invoke it once.

        Args:
            capability_type: Extension point to resolve
            name: Registered component name
            config: Component configuration (provider interprets)

        Returns:
            The component instance created by the factory

        Raises:
            UnknownProviderError: If nothing is registered under the key
            InvalidFieldCombinationError: If the factory rejects its config
        """
        with self._lock:
            factory = self._factories.get((capability_type, name))

        if factory is None:
            raise UnknownProviderError(
                capability_type, name, self.list_providers(capability_type)
            )

        try:
            return factory(dict(config or {}))
        except ConfigurationError:
            raise
        except Exception as e:
            raise InvalidFieldCombinationError(
                f"Invalid configuration for {capability_type.value} '{name}': {e}"
            ) from e

    def is_registered(self, capability_type: CapabilityType, name: str) -> bool:
        """Check whether a factory is registered under the key."""
        with self._lock:
            return (capability_type, name) in self._factories

    def list_providers(self, capability_type: CapabilityType) -> List[str]:
        """List registered names for one capability type."""
        with self._lock:
            return [
                name for (ctype, name) in self._factories if ctype is capability_type
            ]

    def clear(self) -> None:
        """Remove every registered factory. Useful for tests."""
        with self._lock:
            self._factories.clear()
        logger.info("Cleared capability registry")

    def load_entry_points(self) -> int:
        """
        Register factories advertised by installed packages.

        Scans one entry point group per capability type
        ('telemetry_assembly.<capability_type>'). A name already registered
        with the same factory is skipped; a different factory under the same
        name is a conflict.

        Returns:
            Number of factories newly registered

        Raises:
            ProviderRegistrationError: If two packages claim the same key
        """
        loaded = 0
        for capability_type in CapabilityType:
            group = f"{ENTRY_POINT_GROUP_PREFIX}{capability_type.value}"
            for entry_point in importlib.metadata.entry_points(group=group):
                try:
                    factory = entry_point.load()
                except Exception as e:
                    logger.error(
                        f"Failed to load {capability_type.value} provider "
                        f"'{entry_point.name}' ({entry_point.value}): {e}"
                    )
                    continue

                with self._lock:
                    existing = self._factories.get((capability_type, entry_point.name))
                    if existing is factory:
                        logger.debug(
                            f"Provider '{entry_point.name}' already registered, "
                            f"skipping duplicate entry point"
                        )
                        continue
                    if existing is not None:
                        raise ProviderRegistrationError(
                            f"Conflict: {capability_type.value} provider "
                            f"'{entry_point.name}' registered by multiple packages:\n"
                            f"  - {getattr(existing, '__module__', existing)}\n"
                            f"  - {entry_point.value}"
                        )
                    self._factories[(capability_type, entry_point.name)] = factory

                loaded += 1
                logger.info(
                    f"Discovered {capability_type.value} provider: "
                    f"{entry_point.name} ({entry_point.value})"
                )
        return loaded


# Global registry instance
_capability_registry = CapabilityRegistry()
_builtins_registered = False
_builtins_lock = threading.Lock()


def get_capability_registry() -> CapabilityRegistry:
    """
    Get the global CapabilityRegistry instance.

    Built-in components are registered on first access.
    """
    global _builtins_registered
    if not _builtins_registered:
        with _builtins_lock:
            if not _builtins_registered:
                from .components import register_builtin_components

                register_builtin_components(_capability_registry)
                _builtins_registered = True
    return _capability_registry


def register_component(
    capability_type: CapabilityType, name: str, factory: Factory
) -> None:
    """
    Convenience function to register a factory with the global registry.

    Args:
        capability_type: Extension point the factory implements
        name: Component name
        factory: Callable taking the component config dict
    """
    get_capability_registry().register(capability_type, name, factory)
