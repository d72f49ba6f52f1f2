"""
Root configuration document model.

The document arrives already parsed (e.g. from YAML or JSON) as a plain
mapping. ConfigurationDocument.from_dict() validates it once into an
immutable model; the assembler only ever reads it.
"""

import logging
from typing import Any, List, Literal, Mapping, Optional

from pydantic import ConfigDict, Field, ValidationError

from ..exceptions import DocumentParseError
from .components import ComponentSpec, FrozenModel
from .signals import (
    AttributeLimitsModel,
    LoggerProviderModel,
    MeterProviderModel,
    TracerProviderModel,
)

logger = logging.getLogger(__name__)

AttributeType = Literal[
    "string",
    "bool",
    "int",
    "double",
    "string_array",
    "bool_array",
    "int_array",
    "double_array",
]


class PropagatorModel(FrozenModel):
    """
    Propagators to combine.

    composite entries come first, then names from composite_list that were
    not already listed.
    """

    composite: List[ComponentSpec] = Field(default_factory=list)
    composite_list: Optional[str] = None

    def effective_components(self) -> List[ComponentSpec]:
        """Ordered, de-duplicated propagator references."""
        components: List[ComponentSpec] = []
        seen = set()
        for component in self.composite:
            if component.name not in seen:
                seen.add(component.name)
                components.append(component)

        for name in (self.composite_list or "").split(","):
            name = name.strip()
            if name and name not in seen:
                seen.add(name)
                components.append(ComponentSpec(name=name))
        return components


class AttributeNameValueModel(FrozenModel):
    name: str
    value: Any
    type: AttributeType = "string"


class DetectionModel(FrozenModel):
    detectors: List[ComponentSpec] = Field(default_factory=list)


class ResourceModel(FrozenModel):
    attributes: List[AttributeNameValueModel] = Field(default_factory=list)
    attributes_list: Optional[str] = None
    schema_url: Optional[str] = None
    detection: Optional[DetectionModel] = Field(
        default=None, alias="detection/development"
    )


class ConfigurationDocument(FrozenModel):
    """
    Root of a declarative telemetry configuration.

    file_format is deliberately untyped here: a missing or malformed value is
    the version gate's to reject, not the parser's. Unknown top-level
    sections are kept on the model but never assembled.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    file_format: Any = None
    disabled: Optional[bool] = None
    propagator: Optional[PropagatorModel] = None
    resource: Optional[ResourceModel] = None
    attribute_limits: Optional[AttributeLimitsModel] = None
    logger_provider: Optional[LoggerProviderModel] = None
    tracer_provider: Optional[TracerProviderModel] = None
    meter_provider: Optional[MeterProviderModel] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ConfigurationDocument":
        """
        Validate a parsed document.

        Args:
            data: Parsed document mapping

        Returns:
            Immutable ConfigurationDocument

        Raises:
            DocumentParseError: If the mapping does not fit the schema
        """
        if not isinstance(data, Mapping):
            raise DocumentParseError(
                f"Configuration document must be a mapping, got {type(data).__name__}"
            )
        try:
            document = cls.model_validate(dict(data))
        except ValidationError as e:
            raise DocumentParseError(
                f"Invalid configuration document: {e.error_count()} error(s)\n{e}",
                validation_error=e,
            ) from e

        if document.model_extra:
            logger.debug(
                f"Ignoring unassembled document sections: {sorted(document.model_extra)}"
            )
        return document
