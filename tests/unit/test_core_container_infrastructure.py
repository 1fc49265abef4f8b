"""Unit tests for the container (composition root).

Tests cover:
- Backend selection for stores and the alert channel
- Unsupported backends
- Singleton behaviour and cache clearing
- Gateway wiring from settings

Note:
    Factories import their adapters inside the function body, so external
    clients are patched at their import location (``redis.Redis``,
    ``boto3.client``). ``get_settings`` is patched in both container modules.
"""

from unittest.mock import patch

import pytest

from command_gateway.application.services import OutputEscaper
from command_gateway.core.config import Settings
from command_gateway.core.container import (
    build_envelope,
    clear_container_cache,
    get_command_gateway,
    get_error_logger,
    get_input_validator,
    get_key_value_store,
    get_notifier,
    get_option_store,
    get_output_escaper,
    get_rate_limiter,
    get_security_gate,
    get_threat_scanner,
    get_token_service,
)
from command_gateway.infrastructure.notifications import SESNotifier, StubNotifier
from command_gateway.infrastructure.response import BufferedResponseChannel
from command_gateway.infrastructure.security import JWTTokenService
from command_gateway.infrastructure.storage import (
    DatabaseOptionStore,
    InMemoryKeyValueStore,
    InMemoryOptionStore,
    RedisKeyValueStore,
)


@pytest.fixture
def use_settings(tmp_path):
    """Patch the container to build from the given settings overrides."""
    patchers = []

    def _use(**overrides):
        overrides.setdefault("error_log_path", str(tmp_path / "command-errors.log"))
        configured = Settings(**overrides)
        for module in ("infrastructure", "gateway"):
            patcher = patch(
                f"command_gateway.core.container.{module}.get_settings",
                return_value=configured,
            )
            patcher.start()
            patchers.append(patcher)
        clear_container_cache()
        return configured

    yield _use

    for patcher in patchers:
        patcher.stop()
    clear_container_cache()


@pytest.mark.unit
class TestStoreSelection:
    """Test adapter selection for the storage ports."""

    def test_memory_backends(self, use_settings):
        use_settings()

        assert isinstance(get_key_value_store(), InMemoryKeyValueStore)
        assert isinstance(get_option_store(), InMemoryOptionStore)

    def test_redis_backend(self, use_settings):
        use_settings(key_value_backend="redis", redis_url="redis://cache:6379/2")

        with patch("redis.Redis.from_url") as from_url:
            store = get_key_value_store()

        assert isinstance(store, RedisKeyValueStore)
        assert from_url.call_args.args[0] == "redis://cache:6379/2"

    def test_database_backend(self, use_settings, tmp_path):
        use_settings(option_backend="database", database_url=f"sqlite:///{tmp_path / 'gw.db'}")

        store = get_option_store()

        assert isinstance(store, DatabaseOptionStore)
        assert store.update("x", [1]).value is None
        assert store.get("x").value == [1]

    @pytest.mark.parametrize(
        ("overrides", "factory"),
        [
            ({"key_value_backend": "memcached"}, get_key_value_store),
            ({"option_backend": "files"}, get_option_store),
            ({"notifier_backend": "smtp"}, get_notifier),
        ],
    )
    def test_unsupported_backend(self, use_settings, overrides, factory):
        use_settings(**overrides)

        with pytest.raises(ValueError, match="Unsupported"):
            factory()


@pytest.mark.unit
class TestNotifierSelection:
    """Test adapter selection for operator alerts."""

    def test_log_backend(self, use_settings):
        use_settings()

        assert isinstance(get_notifier(), StubNotifier)

    def test_ses_backend(self, use_settings):
        use_settings(notifier_backend="ses", aws_region="eu-west-1")

        with patch("boto3.client") as boto_client:
            notifier = get_notifier()

        assert isinstance(notifier, SESNotifier)
        boto_client.assert_called_once_with("ses", region_name="eu-west-1")


@pytest.mark.unit
class TestGatewayWiring:
    """Test singletons and settings flowing into the gateway."""

    def test_singletons(self, use_settings):
        use_settings()

        assert get_rate_limiter() is get_rate_limiter()
        assert get_command_gateway() is get_command_gateway()
        assert get_security_gate()._rate_limiter is get_rate_limiter()
        assert isinstance(get_token_service(), JWTTokenService)
        assert isinstance(get_output_escaper(), OutputEscaper)
        assert get_output_escaper() is get_output_escaper()

    def test_clear_cache_rebuilds(self, use_settings):
        use_settings()
        first = get_error_logger()

        clear_container_cache()

        assert get_error_logger() is not first

    def test_host_unescaping_from_settings(self, use_settings):
        use_settings(unescape_host_input=True)

        result = get_input_validator().sanitize({"quote": "It\\'s"})

        assert result.value == {"quote": "It's"}

    def test_threat_scanner_toggle(self, use_settings):
        use_settings(threat_scan_enabled=False)

        assert get_threat_scanner() is None

    def test_gate_uses_site_host(self, use_settings):
        use_settings(site_url="https://Admin.Example.com/")

        assert get_security_gate()._expected_host == "admin.example.com"

    def test_build_envelope_is_per_request(self, use_settings):
        use_settings(request_id_prefix="req_")
        channel = BufferedResponseChannel()

        first = build_envelope(channel)
        second = build_envelope(channel)

        assert first is not second
        assert first.request_id.startswith("req_")
