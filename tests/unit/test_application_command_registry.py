"""Unit tests for CommandRegistry (endpoint catalog and deprecated aliases)."""

import pytest

from command_gateway.application.gateway import CommandRegistry
from command_gateway.domain.enums import EndpointPriority
from command_gateway.domain.value_objects import EndpointConfig


def _noop(context):
    return {}


@pytest.mark.unit
class TestRegistration:
    """Test endpoint registration."""

    def test_register_with_fields(self, registry):
        config = registry.register("save_settings", handler=_noop, rate_limit=20)

        assert registry.get("save_settings") is config
        assert config.rate_limit == 20
        assert config.capability is None
        assert "save_settings" in registry
        assert len(registry) == 1

    def test_register_config_with_overrides(self, registry):
        base = EndpointConfig(handler=_noop, capability="read", description="Base")

        config = registry.register("export", base, description="Export settings")

        assert config.capability == "read"
        assert config.description == "Export settings"

    def test_decorator_registers_handler(self, registry):
        @registry.command("reset", priority=EndpointPriority.HIGH)
        def reset(context):
            return {"reset": True}

        assert registry.get("reset").handler is reset
        assert registry.by_priority(EndpointPriority.HIGH) == ["reset"]

    def test_register_replaces_existing(self, registry):
        registry.register("export", rate_limit=5)
        registry.register("export", rate_limit=7)

        assert registry.get("export").rate_limit == 7

    @pytest.mark.parametrize(
        ("action", "fields"),
        [("", {}), ("save", {"handler": "not callable"})],
    )
    def test_invalid_registration(self, registry, action, fields):
        with pytest.raises(ValueError):
            registry.register(action, **fields)


@pytest.mark.unit
class TestAliases:
    """Test deprecated alias resolution."""

    def test_alias_resolves_to_target(self, registry):
        registry.register("save_settings", handler=_noop)
        registry.alias("save_options", "save_settings")

        endpoint = registry.resolve("save_options")

        assert endpoint.action == "save_settings"
        assert endpoint.requested == "save_options"
        assert endpoint.is_deprecated is True
        assert endpoint.deprecation_warning()["new_endpoint"] == "save_settings"
        assert registry.aliases() == {"save_options": "save_settings"}
        assert "save_options" in registry

    def test_direct_resolution_is_not_deprecated(self, registry):
        registry.register("save_settings")

        assert registry.resolve("save_settings").is_deprecated is False

    def test_unknown_action(self, registry):
        assert registry.resolve("missing") is None

    def test_alias_to_unknown_target(self, registry):
        with pytest.raises(ValueError, match="not a registered endpoint"):
            registry.alias("old", "missing")

    def test_alias_cannot_shadow_endpoint(self, registry):
        registry.register("a")
        registry.register("b")

        with pytest.raises(ValueError, match="shadow"):
            registry.alias("a", "b")

    def test_endpoint_cannot_reuse_alias_name(self, registry):
        registry.register("b")
        registry.alias("a", "b")

        with pytest.raises(ValueError, match="deprecated alias"):
            registry.register("a")


@pytest.mark.unit
class TestRegistryStats:
    """Test registry statistics."""

    def test_stats_apply_defaults(self):
        registry = CommandRegistry()
        registry.register("save", rate_limit=20, priority=EndpointPriority.HIGH)
        registry.register("report", capability="read")
        registry.register("export", capability="read", priority=EndpointPriority.LOW)
        registry.alias("save_v1", "save")

        stats = registry.stats()

        assert stats["total_endpoints"] == 3
        assert stats["deprecated_aliases"] == 1
        assert stats["by_priority"] == {"high": 1, "medium": 1, "low": 1}
        assert stats["by_capability"] == {"admin": 1, "read": 2}
        assert stats["total_rate_limit"] == 40
        assert stats["average_rate_limit"] == 13.33

    def test_empty_stats(self):
        stats = CommandRegistry().stats()

        assert stats["total_endpoints"] == 0
        assert stats["average_rate_limit"] == 0

    def test_iteration_is_sorted(self, registry):
        for action in ("zeta", "alpha", "mid"):
            registry.register(action)

        assert list(registry) == ["alpha", "mid", "zeta"]
