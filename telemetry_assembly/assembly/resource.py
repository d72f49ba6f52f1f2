"""
Resource resolution.

Precedence, lowest to highest: SDK defaults (telemetry.sdk.*, service.name,
OTEL_RESOURCE_ATTRIBUTES), detected attributes, attributes_list, attributes.
The result is shared by every signal of the document.
"""

import logging
from typing import Any, Dict, Optional

from opentelemetry.sdk.resources import Resource

from ..exceptions import InvalidFieldCombinationError
from ..ledger import ResourceLedger, is_closeable
from ..model import AttributeNameValueModel, ResourceModel
from ..registry import CapabilityRegistry, CapabilityType
from ..utils import parse_key_value_list

logger = logging.getLogger(__name__)

_SCALAR_TYPES = {
    "string": (str,),
    "bool": (bool,),
    "int": (int,),
    "double": (float, int),
}


def _coerce_scalar(name: str, type_name: str, value: Any) -> Any:
    expected = _SCALAR_TYPES[type_name]
    # bool is an int subclass but never a valid int or double
    if isinstance(value, bool) and type_name != "bool":
        expected = ()
    if not isinstance(value, expected):
        raise InvalidFieldCombinationError(
            f"Resource attribute '{name}' is declared {type_name} "
            f"but has value {value!r}"
        )
    if type_name == "double":
        return float(value)
    return value


def coerce_attribute(attribute: AttributeNameValueModel) -> Any:
    """
    Check an attribute's value against its declared type.

    Raises:
        InvalidFieldCombinationError: If the value does not match the type
    """
    if attribute.type.endswith("_array"):
        if not isinstance(attribute.value, (list, tuple)):
            raise InvalidFieldCombinationError(
                f"Resource attribute '{attribute.name}' is declared {attribute.type} "
                f"but has value {attribute.value!r}"
            )
        base_type = attribute.type[: -len("_array")]
        return [_coerce_scalar(attribute.name, base_type, item) for item in attribute.value]
    return _coerce_scalar(attribute.name, attribute.type, attribute.value)


def resolve_resource(
    section: Optional[ResourceModel],
    registry: CapabilityRegistry,
    ledger: ResourceLedger,
) -> Resource:
    """
    Build the resource shared by all signals.

    Args:
        section: The document's resource section, or None
        registry: Registry to resolve resource detectors against
        ledger: Ledger receiving any shutdown-bearing detector

    Returns:
        The resolved Resource
    """
    if section is None:
        return Resource.create()

    detected = Resource.get_empty()
    if section.detection is not None:
        for component in section.detection.detectors:
            detector = registry.resolve(
                CapabilityType.RESOURCE_DETECTOR, component.name, component.config
            )
            if is_closeable(detector):
                ledger.acquire(detector, name=f"resource_detector '{component.name}'")
            try:
                detected = detected.merge(detector.detect())
            except Exception as e:
                raise InvalidFieldCombinationError(
                    f"Resource detector '{component.name}' failed: {e}"
                ) from e

    try:
        attributes: Dict[str, Any] = dict(
            parse_key_value_list(section.attributes_list, what="resource attribute")
        )
    except ValueError as e:
        raise InvalidFieldCombinationError(f"Invalid attributes_list: {e}") from e

    for attribute in section.attributes:
        attributes[attribute.name] = coerce_attribute(attribute)

    resource = (
        Resource.create()
        .merge(detected)
        .merge(Resource(attributes, schema_url=section.schema_url))
    )
    logger.debug(f"Resolved resource with {len(resource.attributes)} attribute(s)")
    return resource
