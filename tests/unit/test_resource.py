"""
Unit tests for resource and propagator resolution.
"""

import pytest
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.sdk.resources import Resource

from telemetry_assembly.assembly.propagator import default_propagator, resolve_propagator
from telemetry_assembly.assembly.resource import coerce_attribute, resolve_resource
from telemetry_assembly.exceptions import (
    InvalidFieldCombinationError,
    UnknownProviderError,
)
from telemetry_assembly.ledger import ResourceLedger
from telemetry_assembly.model import (
    AttributeNameValueModel,
    PropagatorModel,
    ResourceModel,
)


@pytest.fixture
def ledger():
    return ResourceLedger()


class TestCoerceAttribute:
    """Test typed resource attributes."""

    @pytest.mark.parametrize(
        "type_name,value,expected",
        [
            ("string", "checkout", "checkout"),
            ("bool", True, True),
            ("int", 3, 3),
            ("double", 2, 2.0),
            ("double", 0.5, 0.5),
            ("string_array", ["a", "b"], ["a", "b"]),
            ("int_array", [1, 2], [1, 2]),
            ("double_array", [1, 2.5], [1.0, 2.5]),
            ("bool_array", [True, False], [True, False]),
        ],
    )
    def test_matching_values(self, type_name, value, expected):
        attribute = AttributeNameValueModel(name="key", value=value, type=type_name)

        assert coerce_attribute(attribute) == expected

    @pytest.mark.parametrize(
        "type_name,value",
        [
            ("int", "3"),
            ("int", True),
            ("double", False),
            ("bool", 1),
            ("string", 5),
            ("string_array", "not-a-list"),
            ("int_array", [1, "2"]),
        ],
    )
    def test_mismatched_values(self, type_name, value):
        attribute = AttributeNameValueModel(name="key", value=value, type=type_name)

        with pytest.raises(InvalidFieldCombinationError, match="'key'"):
            coerce_attribute(attribute)


class TestResolveResource:
    """Test resolve_resource()."""

    def test_no_resource_section_uses_sdk_default(self, registry, ledger):
        resource = resolve_resource(None, registry, ledger)

        assert resource.attributes["service.name"] == Resource.create().attributes["service.name"]
        assert "telemetry.sdk.language" in resource.attributes

    def test_attributes_and_schema_url(self, registry, ledger):
        spec = ResourceModel.model_validate(
            {
                "attributes": [
                    {"name": "service.name", "value": "checkout"},
                    {"name": "replicas", "value": 3, "type": "int"},
                ],
                "schema_url": "https://opentelemetry.io/schemas/1.27.0",
            }
        )

        resource = resolve_resource(spec, registry, ledger)

        assert resource.attributes["service.name"] == "checkout"
        assert resource.attributes["replicas"] == 3
        assert resource.schema_url == "https://opentelemetry.io/schemas/1.27.0"

    def test_attributes_win_over_attributes_list(self, registry, ledger):
        spec = ResourceModel.model_validate(
            {
                "attributes": [{"name": "service.name", "value": "from-attributes"}],
                "attributes_list": "service.name=from-list,team=pay%20ments",
            }
        )

        resource = resolve_resource(spec, registry, ledger)

        assert resource.attributes["service.name"] == "from-attributes"
        assert resource.attributes["team"] == "pay ments"

    def test_invalid_attributes_list(self, registry, ledger):
        spec = ResourceModel.model_validate({"attributes_list": "no-equals-sign"})

        with pytest.raises(InvalidFieldCombinationError, match="attributes_list"):
            resolve_resource(spec, registry, ledger)

    def test_detected_attributes_have_lowest_precedence(
        self, recording_registry, ledger
    ):
        spec = ResourceModel.model_validate(
            {
                "attributes": [{"name": "service.name", "value": "explicit"}],
                "detection/development": {
                    "detectors": [
                        {
                            "recording": {
                                "attributes": {
                                    "service.name": "detected",
                                    "host.name": "box-1",
                                }
                            }
                        }
                    ]
                },
            }
        )

        resource = resolve_resource(spec, recording_registry, ledger)

        assert resource.attributes["service.name"] == "explicit"
        assert resource.attributes["host.name"] == "box-1"
        assert ledger.names == ["resource_detector 'recording'"]

    def test_process_detector(self, registry, ledger):
        spec = ResourceModel.model_validate(
            {"detection/development": {"detectors": [{"process": None}]}}
        )

        resource = resolve_resource(spec, registry, ledger)

        assert "process.pid" in resource.attributes

    def test_unknown_detector(self, registry, ledger):
        spec = ResourceModel.model_validate(
            {"detection/development": {"detectors": [{"cloud": None}]}}
        )

        with pytest.raises(UnknownProviderError):
            resolve_resource(spec, registry, ledger)


class TestResolvePropagator:
    """Test resolve_propagator()."""

    def test_default_propagates_nothing(self, registry, ledger):
        propagator = resolve_propagator(None, registry, ledger)
        carrier = {}

        propagator.inject(carrier)

        assert isinstance(propagator, CompositePropagator)
        assert carrier == {}
        assert default_propagator().fields == set()

    def test_composite_fields(self, registry, ledger):
        spec = PropagatorModel.model_validate(
            {"composite": [{"tracecontext": None}], "composite_list": "baggage,b3"}
        )

        propagator = resolve_propagator(spec, registry, ledger)

        assert {"traceparent", "baggage", "b3"} <= propagator.fields
        assert len(ledger) == 0

    def test_b3multi_fields(self, registry, ledger):
        spec = PropagatorModel.model_validate({"composite_list": "b3multi"})

        propagator = resolve_propagator(spec, registry, ledger)

        assert "x-b3-traceid" in propagator.fields

    def test_propagator_with_config_rejected(self, registry, ledger):
        spec = PropagatorModel.model_validate({"composite": [{"tracecontext": {"x": 1}}]})

        with pytest.raises(InvalidFieldCombinationError):
            resolve_propagator(spec, registry, ledger)

    def test_closeable_propagator_goes_to_ledger(self, recording_registry, ledger):
        spec = PropagatorModel.model_validate({"composite_list": "recording"})

        resolve_propagator(spec, recording_registry, ledger)

        assert ledger.names == ["propagator 'recording'"]

    def test_unknown_propagator(self, registry, ledger):
        spec = PropagatorModel.model_validate({"composite_list": "xray"})

        with pytest.raises(UnknownProviderError) as exc_info:
            resolve_propagator(spec, registry, ledger)

        assert exc_info.value.name == "xray"
