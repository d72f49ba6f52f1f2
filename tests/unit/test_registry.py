"""
Unit tests for CapabilityRegistry.

Tests validate:
1. Registration and duplicate detection
2. Resolution, unknown providers and factory error wrapping
3. Entry point discovery and conflict handling
4. Global registry with built-in components
5. Concurrent resolution
"""

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import MagicMock, patch

import pytest

from telemetry_assembly.exceptions import (
    ConfigurationError,
    ErrorKind,
    InvalidFieldCombinationError,
    ProviderRegistrationError,
    UnknownProviderError,
)
from telemetry_assembly.registry import (
    CapabilityRegistry,
    CapabilityType,
    get_capability_registry,
    register_component,
)


def make_entry_point(name, factory, value="pkg.module:factory"):
    entry_point = MagicMock()
    entry_point.name = name
    entry_point.value = value
    entry_point.load.return_value = factory
    return entry_point


def entry_points_for(mapping):
    """Build an entry_points(group=...) replacement from {group: [entry points]}."""

    def entry_points(group):
        return mapping.get(group, [])

    return entry_points


@pytest.fixture
def empty_registry():
    return CapabilityRegistry()


class TestRegistration:
    """Test register/unregister."""

    def test_register_and_check(self, empty_registry):
        empty_registry.register(CapabilityType.SPAN_EXPORTER, "noop", lambda config: None)

        assert empty_registry.is_registered(CapabilityType.SPAN_EXPORTER, "noop")
        assert not empty_registry.is_registered(CapabilityType.LOG_RECORD_EXPORTER, "noop")

    def test_duplicate_registration_raises(self, empty_registry):
        empty_registry.register(CapabilityType.SAMPLER, "custom", lambda config: 1)

        with pytest.raises(ProviderRegistrationError, match="already registered"):
            empty_registry.register(CapabilityType.SAMPLER, "custom", lambda config: 2)

    def test_registration_error_is_value_error(self):
        assert issubclass(ProviderRegistrationError, ValueError)
        assert not issubclass(ProviderRegistrationError, ConfigurationError)

    def test_same_name_under_different_types(self, empty_registry):
        empty_registry.register(CapabilityType.SPAN_EXPORTER, "otlp", lambda config: "span")
        empty_registry.register(CapabilityType.METRIC_EXPORTER, "otlp", lambda config: "metric")

        assert empty_registry.resolve(CapabilityType.SPAN_EXPORTER, "otlp") == "span"
        assert empty_registry.resolve(CapabilityType.METRIC_EXPORTER, "otlp") == "metric"

    def test_unregister(self, empty_registry):
        empty_registry.register(CapabilityType.PROPAGATOR, "custom", lambda config: None)
        empty_registry.unregister(CapabilityType.PROPAGATOR, "custom")
        empty_registry.unregister(CapabilityType.PROPAGATOR, "never-registered")

        assert not empty_registry.is_registered(CapabilityType.PROPAGATOR, "custom")

    def test_list_providers_per_type(self, empty_registry):
        empty_registry.register(CapabilityType.SAMPLER, "a", lambda config: None)
        empty_registry.register(CapabilityType.SAMPLER, "b", lambda config: None)
        empty_registry.register(CapabilityType.AGGREGATION, "c", lambda config: None)

        assert sorted(empty_registry.list_providers(CapabilityType.SAMPLER)) == ["a", "b"]

    def test_clear(self, empty_registry):
        empty_registry.register(CapabilityType.SAMPLER, "a", lambda config: None)
        empty_registry.clear()

        assert empty_registry.list_providers(CapabilityType.SAMPLER) == []


class TestResolve:
    """Test resolve() behavior."""

    def test_factory_receives_config(self, empty_registry):
        factory = MagicMock(return_value="instance")
        empty_registry.register(CapabilityType.SPAN_EXPORTER, "custom", factory)

        result = empty_registry.resolve(
            CapabilityType.SPAN_EXPORTER, "custom", {"endpoint": "http://collector"}
        )

        assert result == "instance"
        factory.assert_called_once_with({"endpoint": "http://collector"})

    def test_missing_config_becomes_empty_dict(self, empty_registry):
        factory = MagicMock()
        empty_registry.register(CapabilityType.SAMPLER, "custom", factory)

        empty_registry.resolve(CapabilityType.SAMPLER, "custom")

        factory.assert_called_once_with({})

    def test_factory_gets_a_copy_of_config(self, empty_registry):
        def mutating_factory(config):
            config["added"] = True
            return config

        empty_registry.register(CapabilityType.SAMPLER, "custom", mutating_factory)
        original = {"ratio": 0.5}

        empty_registry.resolve(CapabilityType.SAMPLER, "custom", original)

        assert original == {"ratio": 0.5}

    def test_each_resolve_invokes_factory_once(self, empty_registry):
        factory = MagicMock(side_effect=lambda config: object())
        empty_registry.register(CapabilityType.SAMPLER, "custom", factory)

        first = empty_registry.resolve(CapabilityType.SAMPLER, "custom")
        second = empty_registry.resolve(CapabilityType.SAMPLER, "custom")

        assert first is not second
        assert factory.call_count == 2

    def test_unknown_provider_names_type_and_name(self, empty_registry):
        empty_registry.register(CapabilityType.SPAN_EXPORTER, "console", lambda config: None)

        with pytest.raises(UnknownProviderError) as exc_info:
            empty_registry.resolve(CapabilityType.SPAN_EXPORTER, "zipkin")

        error = exc_info.value
        assert error.kind is ErrorKind.UNKNOWN_PROVIDER
        assert error.capability_type is CapabilityType.SPAN_EXPORTER
        assert error.name == "zipkin"
        assert "span_exporter" in str(error)
        assert "console" in str(error)

    def test_factory_exception_becomes_invalid_field_combination(self, empty_registry):
        def broken_factory(config):
            raise ValueError("ratio must be between 0 and 1")

        empty_registry.register(CapabilityType.SAMPLER, "broken", broken_factory)

        with pytest.raises(InvalidFieldCombinationError) as exc_info:
            empty_registry.resolve(CapabilityType.SAMPLER, "broken", {"ratio": 2})

        assert "sampler 'broken'" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_configuration_errors_pass_through(self, empty_registry):
        def nested_lookup(config):
            raise UnknownProviderError(CapabilityType.SPAN_EXPORTER, "inner")

        empty_registry.register(CapabilityType.SPAN_PROCESSOR, "outer", nested_lookup)

        with pytest.raises(UnknownProviderError) as exc_info:
            empty_registry.resolve(CapabilityType.SPAN_PROCESSOR, "outer")

        assert exc_info.value.name == "inner"


class TestLoadEntryPoints:
    """Test entry point discovery."""

    def test_registers_advertised_factories(self, empty_registry):
        def factory(config):
            return "zipkin"

        mapping = {
            "telemetry_assembly.span_exporter": [make_entry_point("zipkin", factory)]
        }
        with patch(
            "importlib.metadata.entry_points", side_effect=entry_points_for(mapping)
        ):
            loaded = empty_registry.load_entry_points()

        assert loaded == 1
        assert empty_registry.resolve(CapabilityType.SPAN_EXPORTER, "zipkin") == "zipkin"

    def test_scans_one_group_per_capability_type(self, empty_registry):
        with patch("importlib.metadata.entry_points", return_value=[]) as mock_entry_points:
            empty_registry.load_entry_points()

        groups = {call.kwargs["group"] for call in mock_entry_points.call_args_list}
        assert groups == {
            f"telemetry_assembly.{capability_type.value}"
            for capability_type in CapabilityType
        }

    def test_broken_entry_point_is_skipped(self, empty_registry):
        broken = make_entry_point("broken", None)
        broken.load.side_effect = ImportError("missing dependency")
        working = make_entry_point("working", lambda config: "ok")
        mapping = {"telemetry_assembly.sampler": [broken, working]}

        with patch(
            "importlib.metadata.entry_points", side_effect=entry_points_for(mapping)
        ):
            loaded = empty_registry.load_entry_points()

        assert loaded == 1
        assert not empty_registry.is_registered(CapabilityType.SAMPLER, "broken")
        assert empty_registry.is_registered(CapabilityType.SAMPLER, "working")

    def test_same_factory_twice_is_skipped(self, empty_registry):
        def factory(config):
            return None

        empty_registry.register(CapabilityType.SAMPLER, "custom", factory)
        mapping = {"telemetry_assembly.sampler": [make_entry_point("custom", factory)]}

        with patch(
            "importlib.metadata.entry_points", side_effect=entry_points_for(mapping)
        ):
            loaded = empty_registry.load_entry_points()

        assert loaded == 0

    def test_conflicting_factories_raise(self, empty_registry):
        empty_registry.register(CapabilityType.SAMPLER, "custom", lambda config: 1)
        mapping = {
            "telemetry_assembly.sampler": [
                make_entry_point("custom", lambda config: 2, "other_pkg:factory")
            ]
        }

        with patch(
            "importlib.metadata.entry_points", side_effect=entry_points_for(mapping)
        ):
            with pytest.raises(ProviderRegistrationError, match="Conflict"):
                empty_registry.load_entry_points()


class TestGlobalRegistry:
    """Test the process-wide registry."""

    def test_returns_same_instance(self):
        assert get_capability_registry() is get_capability_registry()

    def test_builtins_are_registered(self):
        registry = get_capability_registry()

        assert registry.is_registered(CapabilityType.SPAN_EXPORTER, "otlp_http")
        assert registry.is_registered(CapabilityType.PROPAGATOR, "tracecontext")
        assert registry.is_registered(CapabilityType.METRIC_READER, "periodic")

    def test_register_component_uses_global_registry(self):
        registry = get_capability_registry()
        try:
            register_component(CapabilityType.SPAN_EXPORTER, "test-global", lambda config: 42)
            assert registry.resolve(CapabilityType.SPAN_EXPORTER, "test-global") == 42
        finally:
            registry.unregister(CapabilityType.SPAN_EXPORTER, "test-global")


class TestConcurrentResolve:
    def test_parallel_resolves_each_get_an_instance(self, empty_registry):
        empty_registry.register(
            CapabilityType.SAMPLER, "custom", lambda config: {"id": config["id"]}
        )

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(
                pool.map(
                    lambda i: empty_registry.resolve(
                        CapabilityType.SAMPLER, "custom", {"id": i}
                    ),
                    range(100),
                )
            )

        assert [result["id"] for result in results] == list(range(100))
