"""
Immutable model of the declarative configuration document.
"""

from .components import ComponentSpec
from .document import (
    AttributeNameValueModel,
    ConfigurationDocument,
    DetectionModel,
    PropagatorModel,
    ResourceModel,
)
from .signals import (
    AttributeKeysModel,
    AttributeLimitsModel,
    LoggerProviderModel,
    LogRecordLimitsModel,
    MeterProviderModel,
    SpanLimitsModel,
    TracerProviderModel,
    ViewModel,
    ViewSelectorModel,
    ViewStreamModel,
)

__all__ = [
    "ConfigurationDocument",
    "ComponentSpec",
    "PropagatorModel",
    "ResourceModel",
    "AttributeNameValueModel",
    "DetectionModel",
    "AttributeLimitsModel",
    "SpanLimitsModel",
    "LogRecordLimitsModel",
    "TracerProviderModel",
    "LoggerProviderModel",
    "MeterProviderModel",
    "ViewModel",
    "ViewSelectorModel",
    "ViewStreamModel",
    "AttributeKeysModel",
]
