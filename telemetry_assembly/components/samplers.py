"""
Built-in trace samplers.

Nested samplers of parent_based arrive already resolved: the tracing
assembler resolves them through the registry before calling the factory.
"""

from typing import Any, Dict, Optional

from opentelemetry.sdk.trace.sampling import (
    ALWAYS_OFF,
    ALWAYS_ON,
    ParentBased,
    Sampler,
    TraceIdRatioBased,
)
from pydantic import Field

from ..exceptions import InvalidFieldCombinationError
from ..model.components import EmptyConfig, FrozenModel

PARENT_BASED_KEYS = (
    "root",
    "remote_parent_sampled",
    "remote_parent_not_sampled",
    "local_parent_sampled",
    "local_parent_not_sampled",
)


class TraceIdRatioBasedConfig(FrozenModel):
    ratio: float = Field(default=1.0, ge=0.0, le=1.0)


class ParentBasedConfig(FrozenModel):
    root: Optional[Any] = None
    remote_parent_sampled: Optional[Any] = None
    remote_parent_not_sampled: Optional[Any] = None
    local_parent_sampled: Optional[Any] = None
    local_parent_not_sampled: Optional[Any] = None


def create_always_on(config: Dict[str, Any]) -> Sampler:
    EmptyConfig.model_validate(config)
    return ALWAYS_ON


def create_always_off(config: Dict[str, Any]) -> Sampler:
    EmptyConfig.model_validate(config)
    return ALWAYS_OFF


def create_trace_id_ratio_based(config: Dict[str, Any]) -> Sampler:
    settings = TraceIdRatioBasedConfig.model_validate(config)
    return TraceIdRatioBased(settings.ratio)


def create_parent_based(config: Dict[str, Any]) -> Sampler:
    settings = ParentBasedConfig.model_validate(config)

    delegates = {}
    for key in PARENT_BASED_KEYS:
        sampler = getattr(settings, key)
        if sampler is None:
            continue
        if not isinstance(sampler, Sampler):
            raise InvalidFieldCombinationError(
                f"parent_based.{key} must reference a sampler, got {type(sampler).__name__}"
            )
        delegates[key] = sampler

    root = delegates.pop("root", ALWAYS_ON)
    return ParentBased(root, **delegates)
