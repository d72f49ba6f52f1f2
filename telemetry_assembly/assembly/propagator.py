"""
Propagator resolution.
"""

import logging
from typing import Optional

from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.propagators.textmap import TextMapPropagator

from ..ledger import ResourceLedger, is_closeable
from ..model import PropagatorModel
from ..registry import CapabilityRegistry, CapabilityType

logger = logging.getLogger(__name__)


def default_propagator() -> TextMapPropagator:
    """The propagator used when a document configures none: propagates nothing."""
    return CompositePropagator([])


def resolve_propagator(
    section: Optional[PropagatorModel],
    registry: CapabilityRegistry,
    ledger: ResourceLedger,
) -> TextMapPropagator:
    """
    Resolve the document's propagators into one composite propagator.

    Args:
        section: The document's propagator section, or None
        registry: Registry to resolve propagator names against
        ledger: Ledger receiving any shutdown-bearing propagator

    Returns:
        CompositePropagator over the resolved propagators, in document order
    """
    if section is None:
        return default_propagator()

    components = section.effective_components()
    propagators = []
    for component in components:
        propagator = registry.resolve(
            CapabilityType.PROPAGATOR, component.name, component.config
        )
        if is_closeable(propagator):
            ledger.acquire(propagator, name=f"propagator '{component.name}'")
        propagators.append(propagator)

    logger.debug(
        f"Resolved propagators: {[component.name for component in components]}"
    )
    return CompositePropagator(propagators)
