"""
Shared building blocks for the configuration document model.
"""

from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FrozenModel(BaseModel):
    """
    Base class for document sections.

    Sections are immutable once parsed and reject unknown keys, so a typo in
    a document fails at parse time instead of being silently ignored.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


class EmptyConfig(FrozenModel):
    """Config of a component that takes no settings."""

    pass


class ComponentSpec(FrozenModel):
    """
    Reference to a pluggable component by name.

    In a document a component is a mapping with exactly one key, the
    component name, whose value is the component's config:

        processors:
          - batch:
              schedule_delay: 500
              exporter:
                otlp_http: {}

    A null config (``console:`` in YAML) is treated as an empty one.
    """

    name: str
    config: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _from_single_key_mapping(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data

        # Keyword construction or model_dump() output
        if isinstance(data.get("name"), str) and set(data.keys()) <= {"name", "config"}:
            return {"name": data["name"], "config": data.get("config") or {}}

        if len(data) != 1:
            raise ValueError(
                f"A component must be a mapping with exactly one key naming it, "
                f"got keys {sorted(data.keys())}"
            )
        ((name, config),) = data.items()
        return {"name": name, "config": config or {}}

    def to_document(self) -> Dict[str, Any]:
        """Render back to the single-key document form."""
        return {self.name: dict(self.config)}
