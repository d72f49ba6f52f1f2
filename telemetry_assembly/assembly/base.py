"""
Shared machinery for the per-signal assemblers.

Each signal assembler follows the same steps:
1. Absent sub-document -> no-op provider, nothing acquired
2. Merge shared attribute limits with the signal's own (signal wins)
3. Resolve pipeline stages through the registry, handing each
   shutdown-bearing stage to the ledger as soon as it exists
4. Build the provider with the shared resource attached
5. Hand the provider itself to the ledger, as owner of its pipeline stages

A processor or reader owns its nested exporter and a provider owns its
processors or readers: shutting down the owner shuts them down. The ledger
releases an owned stage itself only when its owner was never built or
failed to shut down.

Failures propagate to the root assembler, which releases the ledger.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

from opentelemetry.sdk.resources import Resource
from pydantic import BaseModel, ValidationError

from ..exceptions import ConfigurationError, InvalidFieldCombinationError
from ..ledger import ResourceLedger, is_closeable
from ..model import AttributeLimitsModel, ComponentSpec
from ..registry import CapabilityRegistry, CapabilityType

logger = logging.getLogger(__name__)


def merge_limits(
    shared: Optional[AttributeLimitsModel], specific: Optional[BaseModel]
) -> Dict[str, int]:
    """
    Merge shared attribute limits with a signal's limits.

    Only fields that are set take part; a field set on the signal wins.
    """
    merged: Dict[str, int] = {}
    for limits in (shared, specific):
        if limits is None:
            continue
        merged.update(
            {key: value for key, value in limits.model_dump().items() if value is not None}
        )
    return merged


class SignalAssembler(ABC):
    """Base class for the logging, tracing and metering assemblers."""

    signal: str = ""

    def __init__(self, registry: CapabilityRegistry, ledger: ResourceLedger):
        self.registry = registry
        self.ledger = ledger
        # Top-level stages the provider shuts down, set by build()
        self.pipeline: List[Any] = []

    def assemble(
        self,
        section: Optional[BaseModel],
        attribute_limits: Optional[AttributeLimitsModel],
        resource: Resource,
    ) -> Any:
        """
        Build the signal's provider.

        Args:
            section: The signal's document section, or None
            attribute_limits: Document-wide attribute limits
            resource: Resource shared by every signal of the document

        Returns:
            Configured provider, or the no-op provider if section is None
        """
        if section is None:
            logger.debug(f"No {self.signal} configuration, using no-op provider")
            return self.noop_provider()

        limits = merge_limits(attribute_limits, getattr(section, "limits", None))
        self.pipeline = []
        try:
            provider = self.build(section, limits, resource)
        except ConfigurationError:
            raise
        except Exception as e:
            raise InvalidFieldCombinationError(
                f"Failed to build {self.signal} provider: {e}"
            ) from e

        self.ledger.acquire(provider, name=f"{self.signal} provider")
        for stage in self.pipeline:
            self.ledger.adopt(stage, provider)
        logger.debug(f"Assembled {self.signal} provider: {type(provider).__name__}")
        return provider

    @abstractmethod
    def noop_provider(self) -> Any:
        """Inert stand-in used when the signal is not configured."""
        pass

    @abstractmethod
    def build(self, section: Any, limits: Dict[str, int], resource: Resource) -> Any:
        """Resolve the signal's stages and construct its provider."""
        pass

    def resolve_stage(
        self,
        capability_type: CapabilityType,
        component: ComponentSpec,
        nested: Optional[Mapping[str, CapabilityType]] = None,
    ) -> Any:
        """
        Resolve one pipeline stage through the registry.

        Config keys listed in nested that hold a component reference are
        resolved first, depth first, and replaced by the resulting instance.
        A nested stage of the same capability type is resolved with the same
        nesting rules (e.g. parent_based samplers inside parent_based).

        Args:
            capability_type: Capability to resolve the component under
            component: The component reference from the document
            nested: Config key -> capability type of nested components

        Returns:
            The stage instance
        """
        config = dict(component.config)
        for key, nested_type in (nested or {}).items():
            value = config.get(key)
            if not isinstance(value, Mapping):
                continue
            nested_component = self._parse_component(value, f"{component.name}.{key}")
            config[key] = self.resolve_stage(
                nested_type,
                nested_component,
                nested if nested_type is capability_type else None,
            )

        instance = self.registry.resolve(capability_type, component.name, config)
        if is_closeable(instance):
            self.ledger.acquire(
                instance, name=f"{capability_type.value} '{component.name}'"
            )
            for key, nested_type in (nested or {}).items():
                if nested_type is not capability_type and key in config:
                    self.ledger.adopt(config[key], instance)
        return instance

    @staticmethod
    def _parse_component(value: Mapping[str, Any], where: str) -> ComponentSpec:
        try:
            return ComponentSpec.model_validate(value)
        except ValidationError as e:
            raise InvalidFieldCombinationError(
                f"Invalid component reference at {where}: {e}"
            ) from e
